"""
Chunk sizing - pick the largest pages-per-chunk that fits a token budget
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from .errors import ScienceMCPError
from .models import PageRange

logger = logging.getLogger(__name__)

CHARS_PER_TOKEN = 4


def chunk_ranges(total_pages: int, chunk_size: int) -> List[PageRange]:
    """Partition pages 1..total_pages into consecutive ranges of chunk_size pages."""
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")
    return [
        PageRange(start=start, end=min(start + chunk_size - 1, total_pages))
        for start in range(1, total_pages + 1, chunk_size)
    ]


def estimate_tokens(text: str) -> float:
    return len(text) / CHARS_PER_TOKEN


def fit_chunk_size(
    render: Callable[[int], str],
    requested_size: int,
    max_tokens: int,
    start_cap: int = 2,
) -> Optional[Tuple[int, str]]:
    """
    Search for a chunk size whose rendered response fits max_tokens

    Starts at min(requested_size, start_cap) and halves (floor) on every
    oversized render or extraction error.

    Args:
        render: Builds the serialized response for a given chunk size
        requested_size: Caller's preferred pages per chunk
        max_tokens: Ceiling on the estimated token count
        start_cap: Largest chunk size ever tried

    Returns:
        (chunk_size, rendered_text), or None once the size drops below 1
    """
    size = min(requested_size, start_cap)
    while size >= 1:
        try:
            rendered = render(size)
        except ScienceMCPError as exc:
            logger.debug("Chunk size %d failed (%s), shrinking", size, exc)
            size //= 2
            continue

        tokens = estimate_tokens(rendered)
        if tokens <= max_tokens:
            return size, rendered

        logger.debug("Chunk size %d is ~%d tokens (limit %d), shrinking", size, tokens, max_tokens)
        size //= 2

    return None
