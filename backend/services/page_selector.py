"""Page selection: maps user page numbers to valid zero-indexed pages."""
import logging
import re
from typing import List, Sequence

logger = logging.getLogger(__name__)

LEADING_INT = re.compile(r"^[+-]?\d+")


def select_pages(requested_one_indexed: Sequence[int], page_count: int) -> List[int]:
    """
    Convert 1-indexed page numbers to 0-indexed ones.

    Out-of-range numbers are dropped without error. Duplicates and the
    caller's order are preserved, so [3, 1] yields [2, 0].
    """
    indices = [n - 1 for n in requested_one_indexed if 0 <= n - 1 < page_count]

    dropped = len(requested_one_indexed) - len(indices)
    if dropped:
        logger.debug(f"Dropped {dropped} out-of-range page numbers (page_count={page_count})")

    return indices


def parse_page_numbers(raw: str) -> List[int]:
    """
    Parse user input such as "1, 3,5" into integers.

    Each comma-separated entry contributes its leading integer ("3abc" -> 3);
    entries without one are skipped.
    """
    numbers = []
    for part in raw.split(","):
        match = LEADING_INT.match(part.strip())
        if match:
            numbers.append(int(match.group()))
    return numbers
