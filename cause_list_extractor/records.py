"""Shapes handed to the persistence layer."""

import re
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from .profiles import CauseListProfile
from .schemas import ExtractionResult


_DIARY_RE = re.compile(r"Diary\s*No\.?\s*(\d+)\s*-\s*(\d+)", re.IGNORECASE)
_TRAILING_NUMBER_RE = re.compile(r"(\d+)$")
_YEAR_RE = re.compile(r"(\d{4})")
_NO_DOT_RE = re.compile(r"No\.\s*")

CASE_NUMBER_PAD = 6


class CauseListRecord(BaseModel):
    """One case row, flattened out of its bench."""
    serial_number: str = Field(..., description="Serial label within the bench")
    full_case_number: str = Field(..., description="Case reference as extracted")
    case_number: str = Field(..., description="Normalized case reference")
    diary_number: Optional[str] = Field(None, description="'number/year' for diary references")
    group_number: Optional[str] = Field(None, description="Bench/court number")
    group_name: Optional[str] = Field(None, description="Bench/court heading")
    court: str = Field(..., description="Court or tribunal name")
    date: Optional[str] = Field(None, description="Listing date as extracted")


def normalize_case_number(full_case_number: str) -> Tuple[str, Optional[str]]:
    """Split a case reference into (normalized case number, diary number).

    'Diary No. 11981-2025'  -> ('Diary No. 11981-2025', '11981/2025')
    'SLP(C) No. 24823/2025' -> ('SLP(C) No.-024823 - 2025', None)
    Anything else is returned unchanged.
    """
    value = (full_case_number or "").strip()

    if value.lower().startswith("diary"):
        match = _DIARY_RE.search(value)
        if match:
            return value, f"{match.group(1)}/{match.group(2)}"
        return value, None

    parts = value.split("/")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return value, None

    number = _TRAILING_NUMBER_RE.search(parts[0])
    if not number:
        return value, None

    padded = number.group(1).zfill(CASE_NUMBER_PAD)
    year_match = _YEAR_RE.search(parts[1])
    year = year_match.group(1) if year_match else parts[1].strip()

    prefix = _NO_DOT_RE.sub("No.-", parts[0], count=1)
    prefix = _TRAILING_NUMBER_RE.sub(padded, prefix)
    return f"{prefix} - {year}", None


def to_payload(result: ExtractionResult, profile: CauseListProfile) -> Dict[str, Any]:
    """Cause list in the response vocabulary of its profile (benches/courts)."""
    return {
        "court": result.label,
        "date": result.date,
        profile.groups_key: [
            {
                profile.number_key: group.number,
                profile.name_key: group.name,
                profile.entries_key: [
                    {profile.serial_key: entry.serial_number, profile.case_key: entry.case_number}
                    for entry in group.entries
                ],
            }
            for group in result.groups
        ],
    }


def flatten_result(result: ExtractionResult) -> List[CauseListRecord]:
    """One record per case, in bench order then list order."""
    records: List[CauseListRecord] = []
    for group in result.groups:
        for entry in group.entries:
            case_number, diary_number = normalize_case_number(entry.case_number)
            records.append(CauseListRecord(
                serial_number=entry.serial_number,
                full_case_number=entry.case_number,
                case_number=case_number,
                diary_number=diary_number,
                group_number=group.number,
                group_name=group.name,
                court=result.label,
                date=result.date,
            ))
    return records
