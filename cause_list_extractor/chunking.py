import math
from typing import List

from .schemas import Chunk


CHARS_PER_TOKEN = 4
DEFAULT_CHUNK_MAX_CHARS = 30_000


def estimate_tokens(text: str) -> int:
    """Approximate token count: one token per four characters, rounded up."""
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def should_chunk(text: str, threshold_tokens: int) -> bool:
    """Determine if a document is too large for a single request."""
    return estimate_tokens(text) > threshold_tokens


def split_into_chunks(text: str, max_chars: int = DEFAULT_CHUNK_MAX_CHARS) -> List[Chunk]:
    """Split text into line-aligned chunks of at most ``max_chars`` characters.

    Lines keep their terminators, so joining the chunk texts in index order
    gives back the input exactly. A line longer than the budget is never
    divided; it becomes a chunk of its own.
    """
    if max_chars <= 0:
        raise ValueError(f"max_chars must be positive, got {max_chars}")
    if not text:
        return []

    pieces: List[str] = []
    current: List[str] = []
    current_size = 0

    for line in text.splitlines(keepends=True):
        if current and current_size + len(line) > max_chars:
            pieces.append("".join(current))
            current = []
            current_size = 0
        current.append(line)
        current_size += len(line)

    if current:
        pieces.append("".join(current))

    return [
        Chunk(index=i, text=piece, estimated_tokens=estimate_tokens(piece))
        for i, piece in enumerate(pieces)
    ]
