"""Turn raw model output into a validated :class:`ExtractionResult`.

The extraction service is not a contract partner: responses arrive wrapped in
code fences, surrounded by prose, cut off at the output limit, or shaped
slightly differently from what was asked. Each step below runs only when the
previous one did not give a usable structure. When nothing works the caller
gets the degraded fallback instead of an exception.

Known limitation: truncation repair counts brackets without tracking string
literals, so a case number containing ``{`` or ``}`` can defeat it. Such a
response ends up as the degraded fallback.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from .errors import ParseFailure
from .profiles import CauseListProfile
from .schemas import Entry, ExtractionResult, Group

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json|JSON)?[ \t]*")
_TRAILING_COMMA_RE = re.compile(r",\s*$")

_CLOSERS = {"{": "}", "[": "]"}

PROMOTED_GROUP_NUMBER = "1"


def fallback_result(profile: CauseListProfile) -> ExtractionResult:
    """Placeholder for a response that could not be parsed at all."""
    return ExtractionResult(label=profile.court_label, date=None, groups=[], degraded=True)


def strip_response_text(raw: str) -> str:
    """Drop code fences and any prose around the outermost JSON object."""
    text = _FENCE_RE.sub("", raw.strip())

    first = text.find("{")
    if first == -1:
        return ""
    text = text[first:]

    last = text.rfind("}")
    if last != -1:
        text = text[:last + 1]
    return text.strip()


def _open_brackets(text: str) -> List[str]:
    """Brackets still open at the end of ``text`` (string contents not excluded)."""
    stack: List[str] = []
    for ch in text:
        if ch in _CLOSERS:
            stack.append(ch)
        elif ch in ("}", "]"):
            if stack and _CLOSERS[stack[-1]] == ch:
                stack.pop()
    return stack


def repair_truncated_json(text: str) -> Optional[str]:
    """Close whatever a truncated response left open, or None if nothing is open."""
    stack = _open_brackets(text)
    if not stack:
        return None
    body = _TRAILING_COMMA_RE.sub("", text)
    return body + "".join(_CLOSERS[ch] for ch in reversed(stack))


def _load_json(text: str) -> Tuple[Dict[str, Any], bool]:
    """Strict parse, then one repair attempt for truncated output.

    Returns the parsed object and whether repair was needed.
    """
    repaired = False
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        closed = repair_truncated_json(text)
        if closed is None:
            raise ParseFailure(f"Response is not valid JSON: {e}") from e
        try:
            data = json.loads(closed)
        except json.JSONDecodeError as e2:
            raise ParseFailure(f"Truncation repair did not produce valid JSON: {e2}") from e2
        repaired = True
        logger.info(f"Repaired truncated response ({len(closed) - len(text)} closing chars appended)")

    if not isinstance(data, dict):
        raise ParseFailure(f"Expected a JSON object, got {type(data).__name__}")
    return data, repaired


def _first_present(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _narrow_entries(raw_entries: Any, profile: CauseListProfile) -> List[Entry]:
    """Keep only the serial label and case number of every usable entry."""
    if not isinstance(raw_entries, list):
        return []

    entries: List[Entry] = []
    for raw in raw_entries:
        if not isinstance(raw, dict):
            continue
        entry = Entry(
            serial_number=_first_present(raw, profile.serial_key, "serial_number"),
            case_number=_first_present(raw, profile.case_key, "case_number"),
        )
        if entry.serial_number or entry.case_number:
            entries.append(entry)
    return entries


def _build_groups(raw_groups: List[Any], profile: CauseListProfile) -> List[Group]:
    groups: List[Group] = []
    for raw in raw_groups:
        if not isinstance(raw, dict):
            continue
        groups.append(Group(
            number=_first_present(raw, profile.number_key, "number"),
            name=_first_present(raw, profile.name_key, "name"),
            entries=_narrow_entries(_first_present(raw, profile.entries_key, "entries"), profile),
        ))
    return groups


def _to_result(data: Dict[str, Any], profile: CauseListProfile) -> ExtractionResult:
    raw_groups = _first_present(data, profile.groups_key, "groups")

    if isinstance(raw_groups, list):
        groups = _build_groups(raw_groups, profile)
    else:
        flat_entries = _first_present(data, profile.entries_key, "entries")
        if not isinstance(flat_entries, list):
            raise ParseFailure(
                f"Response has neither '{profile.groups_key}' nor '{profile.entries_key}' "
                f"(keys: {sorted(data)})"
            )
        entries = _narrow_entries(flat_entries, profile)
        if entries:
            logger.info(f"No '{profile.groups_key}' array; promoting {len(entries)} flat entries into one group")
            groups = [Group(number=PROMOTED_GROUP_NUMBER, entries=entries)]
        else:
            groups = []

    try:
        return ExtractionResult(
            label=_first_present(data, "court", "label") or profile.court_label,
            date=data.get("date"),
            groups=groups,
        )
    except ValidationError as e:
        raise ParseFailure(f"Response does not fit the cause list schema: {e}") from e


def parse_response(raw: str, profile: CauseListProfile) -> ExtractionResult:
    """Parse a response, raising :class:`ParseFailure` when nothing usable is found."""
    text = strip_response_text(raw or "")
    if not text:
        raise ParseFailure("Response contains no JSON object")

    data, repaired = _load_json(text)
    result = _to_result(data, profile)
    # A response cut off before its first complete group says nothing about the document
    if repaired and not result.groups:
        raise ParseFailure("Truncated response holds no complete group")
    return result


def sanitize_response(raw: str, profile: CauseListProfile) -> ExtractionResult:
    """Parse a response, falling back to the degraded placeholder on failure."""
    try:
        result = parse_response(raw, profile)
    except ParseFailure as e:
        preview = (raw or "")[:200].replace("\n", " ")
        logger.warning(f"Could not parse extraction response: {e}. Preview: {preview!r}")
        return fallback_result(profile)

    logger.info(
        f"Parsed {len(result.groups)} {profile.group_noun}(s) with {result.total_entries} case(s)"
    )
    return result
