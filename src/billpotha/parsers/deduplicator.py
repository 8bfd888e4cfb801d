"""Near-duplicate item removal by name similarity."""

import re
import logging
from typing import List, Sequence
from ..models import ReceiptLineItem

logger = logging.getLogger(__name__)

WORD_OVERLAP_RATIO = 0.7


def normalize_item_name(name: str) -> str:
    """Lower-case the name and drop punctuation, keeping whitespace."""
    return re.sub(r'[^\w\s]', '', name.lower())


def are_similar_items(name1: str, name2: str) -> bool:
    """
    Check whether two item names refer to the same product.

    Names are similar when they are equal after normalization, when one
    contains the other, or when more than 70% of the shorter name's words
    appear in both.
    """
    clean1 = normalize_item_name(name1)
    clean2 = normalize_item_name(name2)

    if clean1 == clean2:
        return True

    if clean1 in clean2 or clean2 in clean1:
        return True

    words1 = clean1.split()
    words2 = clean2.split()
    common_words = [word for word in words1 if word in words2]

    return len(common_words) > min(len(words1), len(words2)) * WORD_OVERLAP_RATIO


def deduplicate_items(items: Sequence[ReceiptLineItem]) -> List[ReceiptLineItem]:
    """
    Drop items similar to an earlier kept item.

    The earliest item of each duplicate cluster survives and order is kept,
    so running the result through again returns it unchanged.
    """
    unique_items: List[ReceiptLineItem] = []

    for item in items:
        duplicate_of = next(
            (existing for existing in unique_items if are_similar_items(existing.name, item.name)),
            None
        )
        if duplicate_of is not None:
            logger.debug(f"Dropping {item.name!r} (line {item.line_index}), "
                         f"similar to {duplicate_of.name!r} (line {duplicate_of.line_index})")
            continue
        unique_items.append(item)

    return unique_items
