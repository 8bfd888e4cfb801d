"""OCR text cleanup into an ordered sequence of receipt lines."""

import re
from typing import List, Optional

READABLE_CHARS = re.compile(r'[a-zA-Z0-9\s.,]')


def normalize_lines(text: Optional[str]) -> List[str]:
    """
    Split raw OCR text into trimmed, non-empty lines in their original order.

    Args:
        text: Flattened text from the recognition step

    Returns:
        List of lines; empty for empty input
    """
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


def is_text_usable(text: Optional[str], min_length: int = 20) -> bool:
    """
    Check whether OCR text looks readable enough to trust a parse.

    Text must be at least ``min_length`` characters long and more than half
    of it must be latin letters, digits, whitespace, dots or commas.
    """
    if not text or len(text) < min_length:
        return False

    readable = len(READABLE_CHARS.findall(text))
    return readable / len(text) > 0.5
