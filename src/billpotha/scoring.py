"""
Confidence scoring for parsed receipts.

The score is additive over the extracted fields and clamped to [0, 1]:

- store name present: +0.25, +0.10 more if it is a registry entry
- date present: +0.20, +0.05 more if it is DD-MM-YYYY
- total amount > 0: +0.25, +0.05 more if between 10 and 100,000
- at least one item: +0.20, +0.05 more for several items,
  +0.05 more if every unit price lies between 1 and the total
"""

import re
from typing import Iterable, Sequence
from .models import ReceiptLineItem

DATE_FORMAT = re.compile(r'^\d{2}-\d{2}-\d{4}$')

REASONABLE_TOTAL_MIN = 10
REASONABLE_TOTAL_MAX = 100000


def calculate_confidence(store_name: str,
                         date: str,
                         total_amount: float,
                         items: Sequence[ReceiptLineItem],
                         stores: Iterable[str]) -> float:
    """
    Score how trustworthy an extraction is.

    Args:
        store_name: Extracted store name ('' when missing)
        date: Extracted date ('' when missing)
        total_amount: Extracted total (0 when missing)
        items: Deduplicated line items
        stores: Merchant registry used for the exact-entry bonus

    Returns:
        Confidence between 0.0 and 1.0
    """
    score = 0.0

    if store_name:
        score += 0.25
        if store_name in tuple(stores):
            score += 0.1

    if date:
        score += 0.2
        if DATE_FORMAT.match(date):
            score += 0.05

    if total_amount and total_amount > 0:
        score += 0.25
        if REASONABLE_TOTAL_MIN <= total_amount <= REASONABLE_TOTAL_MAX:
            score += 0.05

    if items:
        score += 0.2
        if len(items) > 1:
            score += 0.05
        if all(1 <= item.unit_price <= total_amount for item in items):
            score += 0.05

    return round(max(0.0, min(score, 1.0)), 4)
