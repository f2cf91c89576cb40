from dataclasses import dataclass
from typing import Optional

from .schemas import ExtractionResult


@dataclass
class ChunkOutcome:
    """What one chunk (or the whole document in single-pass mode) produced."""

    index: int
    value: Optional[ExtractionResult] = None
    success: bool = True
    error: Optional[str] = None
    attempts: int = 0

    @classmethod
    def ok(cls, index: int, value: ExtractionResult, attempts: int = 1) -> 'ChunkOutcome':
        """Create a successful outcome."""
        return cls(index=index, value=value, success=True, attempts=attempts)

    @classmethod
    def fail(cls, index: int, error: str, attempts: int = 1) -> 'ChunkOutcome':
        """Create a failed outcome (nothing usable came back)."""
        return cls(index=index, value=None, success=False, error=error, attempts=attempts)

    @classmethod
    def partial(cls, index: int, value: ExtractionResult, error: str, attempts: int = 1) -> 'ChunkOutcome':
        """Got a structure, but only through the degraded path."""
        return cls(index=index, value=value, success=False, error=error, attempts=attempts)

    @property
    def group_count(self) -> int:
        return len(self.value.groups) if self.value is not None else 0

    def unwrap_or(self, default: ExtractionResult) -> ExtractionResult:
        """Get value or return default if there is none."""
        if self.value is None:
            return default
        return self.value
