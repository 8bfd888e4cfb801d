"""Line item detection: name, unit price and quantity per receipt line."""

import re
import logging
from typing import Iterable, List, Optional, Pattern, Set
from ..models import ReceiptLineItem
from .amount_parser import extract_prices
from .base import BaseParser, ParseResult, ReceiptContext

logger = logging.getLogger(__name__)

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100
MAX_QUANTITY = 99


def extract_quantity(line: str, quantity_patterns: Iterable[Pattern]) -> int:
    """
    Read the purchased quantity from a line.

    Patterns are tried in priority order; the first one whose match captures
    a value between 1 and 99 wins. Lines without a quantity count as 1.
    """
    for pattern in quantity_patterns:
        match = pattern.search(line)
        if not match:
            continue
        try:
            quantity = int(match.group(1) if pattern.groups else match.group())
        except (ValueError, TypeError):
            continue
        if 1 <= quantity <= MAX_QUANTITY:
            return quantity

    return 1


class ItemParser(BaseParser):
    """Detect purchased items on priced lines that are not total lines."""

    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        """
        Extract line items in detection order.

        Args:
            context: Receipt context with normalized lines

        Returns:
            ParseResult whose value is the list of ReceiptLineItem, or None
        """
        items = self.extract_items(context)
        if not items:
            self.logger.warning("No line items found")
            return None

        result = ParseResult(
            value=items,
            source_text=items[0].name,
            line_index=items[0].line_index,
            metadata={'line_indexes': [item.line_index for item in items]}
        )
        self._log_result(result, context)
        return result

    def extract_items(self, context: ReceiptContext) -> List[ReceiptLineItem]:
        """Single pass over the lines; each line yields at most one item."""
        items = []
        used_lines: Set[int] = set()

        for line_idx, line in enumerate(context.lines):
            if line_idx in used_lines:
                continue
            if context.contains_keyword(line, self.config.total_keywords):
                continue

            item = self._parse_item_line(line, line_idx)
            if item:
                items.append(item)
                used_lines.add(line_idx)

        return items

    def _parse_item_line(self, line: str, line_idx: int) -> Optional[ReceiptLineItem]:
        """Build an item from one line, or None if the line is not an item."""
        prices = extract_prices(line, self.config.price_patterns)
        if not prices:
            return None

        name = self._clean_item_name(line)
        if not (MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH) or name.isdigit():
            self.logger.debug(f"Rejected item name {name!r} in line {line_idx}")
            return None

        return ReceiptLineItem(
            name=name,
            unit_price=prices[0],
            quantity=extract_quantity(line, self.config.quantity_patterns),
            line_index=line_idx,
        )

    def _clean_item_name(self, line: str) -> str:
        """Strip prices and leader dots from the line, leaving the item name."""
        name = line
        for pattern in self.config.price_patterns:
            name = pattern.sub('', name)

        name = re.sub(r'\.{2,}', '', name)
        name = re.sub(r'\s+', ' ', name)
        name = re.sub(r'^\W+|\W+$', '', name)
        return name.strip()
