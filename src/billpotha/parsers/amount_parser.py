"""Total amount extraction with total-keyword priority."""

import re
import logging
from typing import Iterable, List, Optional, Pattern
from .base import BaseParser, ParseResult, ReceiptContext

logger = logging.getLogger(__name__)

NON_NUMERIC = re.compile(r'[^\d.]')


def extract_prices(line: str, price_patterns: Iterable[Pattern]) -> List[float]:
    """
    Extract every positive price value from a line.

    Each pattern contributes all of its matches, in pattern order. The first
    capture group is used when the pattern has one, otherwise the whole
    match. Thousands separators and stray characters are stripped before
    parsing; unparsable or non-positive values are dropped.
    """
    prices = []

    for pattern in price_patterns:
        for match in pattern.finditer(line):
            price_str = match.group(1) if pattern.groups and match.group(1) else match.group()
            cleaned = NON_NUMERIC.sub('', price_str.replace(',', ''))
            try:
                price = float(cleaned)
            except ValueError:
                continue
            if price > 0:
                prices.append(price)

    return prices


class AmountParser(BaseParser):
    """Pick the receipt total, preferring lines that carry a total keyword."""

    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        """
        Extract the total amount.

        Args:
            context: Receipt context with normalized lines

        Returns:
            ParseResult with the amount as float, or None if no price exists
        """
        result = self._find_keyword_amount(context)

        if result is None:
            result = self._find_largest_amount(context)
            if result is not None:
                # Can pick an item price or a digit run when the total line was not recognized
                self.logger.warning(f"No total keyword found, using largest amount {result.value}")

        if result is None:
            self.logger.warning("No amount candidates found")
            return None

        self._log_result(result, context)
        return result

    def _find_keyword_amount(self, context: ReceiptContext) -> Optional[ParseResult]:
        """Largest price among all lines containing a total keyword."""
        best = None

        for line_idx, line in enumerate(context.lines):
            if not context.contains_keyword(line, self.config.total_keywords):
                continue

            for amount in extract_prices(line, self.config.price_patterns):
                self.logger.debug(f"Total candidate {amount} in line {line_idx}")
                if best is None or amount > best.value:
                    best = ParseResult(
                        value=amount,
                        source_text=line,
                        line_index=line_idx,
                        metadata={'pass': 'keyword'}
                    )

        return best

    def _find_largest_amount(self, context: ReceiptContext) -> Optional[ParseResult]:
        """Largest price anywhere in the document."""
        best = None

        for line_idx, line in enumerate(context.lines):
            for amount in extract_prices(line, self.config.price_patterns):
                if best is None or amount > best.value:
                    best = ParseResult(
                        value=amount,
                        source_text=line,
                        line_index=line_idx,
                        metadata={'pass': 'fallback'}
                    )

        return best
