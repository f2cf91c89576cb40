import logging
from typing import Dict, List, Optional, Sequence

from .profiles import CauseListProfile, normalize_name, normalize_number, roman_to_int
from .schemas import Entry, ExtractionResult, Group

logger = logging.getLogger(__name__)


def group_merge_key(
    group: Group,
    profile: CauseListProfile,
    chunk_index: int,
    position: int,
) -> str:
    """Key under which a group is reconciled across chunks.

    Explicit number first (Roman numerals and headings such as "Court-2"
    are read as numbers), then the number implied by the heading (profile
    name rules), then the normalized heading, then a key unique to this
    group's place in this chunk.
    """
    number = normalize_number(group.number)
    if number:
        if number.isdigit():
            return number
        roman = roman_to_int(number)
        if roman is not None:
            return str(roman)
        from_number = profile.key_from_name(group.number)
        if from_number is not None:
            return from_number
        return number

    if group.name:
        from_name = profile.key_from_name(group.name)
        if from_name is not None:
            return from_name
        name = normalize_name(group.name)
        if name:
            return name

    return f"unknown_{chunk_index}_{position}"


class _GroupAccumulator:
    """Entries of one merged group, deduplicated by (serial, case)."""

    def __init__(self, group: Group):
        self.number = group.number
        self.name = group.name
        self.entries: List[Entry] = []
        self._seen = set()

    def absorb(self, group: Group) -> int:
        if not self.number and group.number:
            self.number = group.number
        if not self.name and group.name:
            self.name = group.name

        added = 0
        for entry in group.entries:
            if entry.identity in self._seen:
                continue
            self._seen.add(entry.identity)
            self.entries.append(entry)
            added += 1
        return added

    def build(self) -> Group:
        return Group(number=self.number, name=self.name, entries=list(self.entries))


def merge_results(
    results: Sequence[ExtractionResult],
    profile: CauseListProfile,
) -> ExtractionResult:
    """Combine per-chunk results (in chunk index order) into one cause list.

    Groups with equal merge keys are folded together in first-seen order.
    Label and date come from the first result that has any group. The
    merged result is degraded only if it is empty and some input was.
    """
    merged: Dict[str, _GroupAccumulator] = {}
    label: Optional[str] = None
    date: Optional[str] = None
    duplicates = 0

    for chunk_index, result in enumerate(results):
        if result.groups and label is None:
            label = result.label
            date = result.date

        for position, group in enumerate(result.groups):
            key = group_merge_key(group, profile, chunk_index, position)
            if key in merged:
                logger.debug(f"Merging {profile.group_noun} '{group.display_name}' into key '{key}'")
            else:
                merged[key] = _GroupAccumulator(group)
            added = merged[key].absorb(group)
            duplicates += len(group.entries) - added

    if label is None:
        confirmed = next((r for r in results if not r.degraded), None)
        label = confirmed.label if confirmed is not None else profile.court_label
        date = confirmed.date if confirmed is not None else None

    groups = [accumulator.build() for accumulator in merged.values()]
    degraded = not groups and any(r.degraded for r in results)

    if duplicates:
        logger.info(f"Dropped {duplicates} duplicate case(s) while merging")
    logger.info(
        f"Merged {len(results)} partial result(s) into {len(groups)} {profile.group_noun}(s) "
        f"with {sum(len(g.entries) for g in groups)} case(s)"
    )

    return ExtractionResult(label=label, date=date, groups=groups, degraded=degraded)
