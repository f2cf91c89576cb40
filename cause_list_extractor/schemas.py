from dataclasses import dataclass
from typing import List, Optional, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


PromptVariant = Literal["primary", "simplified"]


def _coerce_text(value) -> Optional[str]:
    """Model output is loosely typed: numbers and padded strings are common."""
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return None


# 1. ENTRY
class Entry(BaseModel):
    """One listed case. Only the serial label and the case reference are kept."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    serial_number: str = Field("", description="Serial label as printed in the list (e.g. '12', '3A')")
    case_number: str = Field("", description="Case reference exactly as printed (e.g. 'CP(IB) No. 123/2025')")

    @field_validator("serial_number", "case_number", mode="before")
    @classmethod
    def _as_text(cls, value):
        return _coerce_text(value) or ""

    @property
    def identity(self) -> tuple:
        """Pair used to deduplicate entries inside a group."""
        return (self.serial_number, self.case_number)


# 2. GROUP (bench / court sitting)
class Group(BaseModel):
    """A bench or court room with the cases listed before it."""
    model_config = ConfigDict(extra="ignore")

    number: Optional[str] = Field(None, description="Bench/court number if printed or derivable (e.g. '2')")
    name: Optional[str] = Field(None, description="Bench/court heading (e.g. 'COURT NO. 2')")
    entries: List[Entry] = Field(default_factory=list, description="Cases listed under this bench, in order")

    @field_validator("number", "name", mode="before")
    @classmethod
    def _as_optional_text(cls, value):
        return _coerce_text(value) or None

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        if self.number:
            return f"#{self.number}"
        return "(unnamed)"


# 3. DOCUMENT RESULT
class ExtractionResult(BaseModel):
    """Hierarchical cause list extracted from one document."""
    model_config = ConfigDict(extra="ignore")

    label: str = Field(..., description="Court / tribunal name heading the list")
    date: Optional[str] = Field(None, description="Listing date, format preserved as extracted")
    groups: List[Group] = Field(default_factory=list, description="Benches in first-seen order")
    degraded: bool = Field(
        False,
        description="True when produced by the fallback path rather than a successful parse",
    )
    failed_chunks: List[int] = Field(
        default_factory=list,
        description="Indices of chunks that failed and contributed nothing",
    )

    @field_validator("date", mode="before")
    @classmethod
    def _as_optional_date(cls, value):
        return _coerce_text(value) or None

    @property
    def total_entries(self) -> int:
        return sum(len(group.entries) for group in self.groups)


@dataclass(frozen=True)
class Chunk:
    """An ordered, line-aligned slice of a document."""
    index: int
    text: str
    estimated_tokens: int

    @property
    def size(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class ExtractionRequest:
    """Prompt payload sent to an extraction client."""
    system_prompt: str
    user_prompt: str
    variant: PromptVariant
    temperature: float
