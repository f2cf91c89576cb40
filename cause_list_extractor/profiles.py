"""Per-court settings for cause list extraction.

NCLT and Supreme Court cause lists differ only in vocabulary: what a group is
called in the response, how benches are numbered in their headings, and how
large a list gets before a single request stops being practical. Everything
else in the pipeline is shared.
"""

import re
from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple


_ROMAN_VALUES = {"I": 1, "V": 5, "X": 10, "L": 50, "C": 100}


def roman_to_int(numeral: str) -> Optional[int]:
    """Convert a Roman numeral (I..CCC range) to int, or None if malformed."""
    numeral = numeral.strip().upper()
    if not numeral or any(ch not in _ROMAN_VALUES for ch in numeral):
        return None
    total = 0
    for i, ch in enumerate(numeral):
        value = _ROMAN_VALUES[ch]
        if i + 1 < len(numeral) and _ROMAN_VALUES[numeral[i + 1]] > value:
            total -= value
        else:
            total += value
    return total if total > 0 else None


def normalize_number(value: Optional[str]) -> Optional[str]:
    """'02' -> '2', ' 3 ' -> '3'; non-numeric labels are case-folded."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if value.isdigit():
        return str(int(value))
    return " ".join(value.split()).casefold()


def normalize_name(value: str) -> str:
    return " ".join(value.split()).casefold()


@dataclass(frozen=True)
class NameRule:
    """One way of reading a group number out of a group heading.

    kind="number"  -> `pattern` captures decimal digits
    kind="roman"   -> `pattern` captures a Roman numeral
    kind="literal" -> `pattern` is a substring; a match yields `key`
    """
    kind: Literal["number", "roman", "literal"]
    pattern: str
    key: Optional[str] = None

    def match(self, name: str) -> Optional[str]:
        if self.kind == "literal":
            return self.key if self.pattern.casefold() in name.casefold() else None

        found = re.search(self.pattern, name, re.IGNORECASE)
        if not found:
            return None
        captured = found.group(1)
        if self.kind == "number":
            return str(int(captured))
        value = roman_to_int(captured)
        return str(value) if value is not None else None


@dataclass(frozen=True)
class CauseListProfile:
    """Vocabulary, prompts and thresholds for one kind of cause list."""
    name: str
    court_label: str
    description: str
    group_noun: str

    # Response keys
    groups_key: str
    number_key: str
    name_key: str
    entries_key: str = "cases"
    serial_key: str = "serialNumber"
    case_key: str = "caseNumber"

    # Prompt material
    case_number_examples: str = ""
    extra_rules: Tuple[str, ...] = ()
    heading_examples: Tuple[Tuple[str, str], ...] = ()
    sample_date: str = "17-09-2025"
    sample_cases: Tuple[Tuple[str, str, str], ...] = ()

    # Merge key
    name_rules: Tuple[NameRule, ...] = field(default_factory=tuple)

    # Strategy
    hard_chunk_threshold_tokens: int = 100_000
    min_expected_groups: int = 1

    def key_from_name(self, name: Optional[str]) -> Optional[str]:
        """Group number implied by a heading, per the first matching rule."""
        if not name:
            return None
        for rule in self.name_rules:
            key = rule.match(name)
            if key is not None:
                return key
        return None


NCLT = CauseListProfile(
    name="nclt",
    court_label="NATIONAL COMPANY LAW TRIBUNAL",
    description="NCLT (National Company Law Tribunal) cause list",
    group_noun="bench",
    groups_key="benches",
    number_key="benchNumber",
    name_key="benchName",
    case_number_examples="CP, MA, IA, IB, NCLT, etc.",
    extra_rules=(
        "Look for cases in different sections and categories",
    ),
    heading_examples=(
        ("Ahmedabad Bench Court-I", "1"),
        ("Ahmedabad Bench Court-II", "2"),
    ),
    sample_date="17-09-2025",
    sample_cases=(
        ("1", "Ahmedabad Bench Court-I", "CP(IB) No. 123/2025"),
        ("2", "Ahmedabad Bench Court-II", "MA No. 456/2025"),
    ),
    name_rules=(
        NameRule("number", r"\bcourt\s*[-:]?\s*(\d+)\b"),
        NameRule("roman", r"\bcourt\s*[-:]?\s*([IVXLC]+)\b"),
    ),
    hard_chunk_threshold_tokens=100_000,
    min_expected_groups=1,
)


SUPREME_COURT = CauseListProfile(
    name="supreme_court",
    court_label="SUPREME COURT OF INDIA",
    description="Supreme Court of India cause list",
    group_noun="court",
    groups_key="courts",
    number_key="courtNumber",
    name_key="courtName",
    case_number_examples="Diary No., SLP, MA, WP, W.P., CONMT.PET., ARBIT.PETITON, etc.",
    extra_rules=(
        'Do NOT include connected cases (cases marked "Connected" or with decimal serial numbers like "1.1", "2.1")',
        "Look for cases in ALL sections: FRESH, AFTER NOTICE, BAIL MATTERS, AD INTERIM STAY MATTERS, etc.",
        "A main cause list usually has 15-20 courts - do NOT stop after the first court",
    ),
    heading_examples=(
        ("CHIEF JUSTICE'S COURT", "1"),
        ("COURT NO. : 2", "2"),
        ("COURT NO. : 3", "3"),
    ),
    sample_date="04-09-2025",
    sample_cases=(
        ("1", "CHIEF JUSTICE'S COURT", "Diary No. 11981-2025"),
        ("26", "COURT NO. 2", "SLP(C) No. 24823/2025"),
    ),
    name_rules=(
        NameRule("number", r"\bcourt\s*no\.?\s*:?\s*(\d+)"),
        NameRule("literal", "CHIEF JUSTICE", key="1"),
    ),
    hard_chunk_threshold_tokens=60_000,
    min_expected_groups=5,
)


PROFILES = {
    NCLT.name: NCLT,
    SUPREME_COURT.name: SUPREME_COURT,
}


def get_profile(name: str) -> CauseListProfile:
    """Look up a profile by name ('nclt', 'supreme_court')."""
    try:
        return PROFILES[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown cause list profile: {name!r}. Use one of: {', '.join(sorted(PROFILES))}"
        ) from None
