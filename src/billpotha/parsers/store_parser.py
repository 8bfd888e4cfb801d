"""Merchant name matching against the configured store registry."""

import logging
from typing import Optional, Tuple
from .base import BaseParser, ParseResult, ReceiptContext

logger = logging.getLogger(__name__)

# Store names are printed in the receipt header
HEADER_LINES = 6


class StoreNameParser(BaseParser):
    """Find the merchant in the first header lines using exact then fuzzy matching."""

    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        """
        Extract the store name from the receipt header.

        Args:
            context: Receipt context with normalized lines

        Returns:
            ParseResult with the canonical registry name, or None
        """
        for line_idx, line in enumerate(context.lines[:HEADER_LINES]):
            match = self._match_line(line)
            if match:
                store, match_type = match
                result = ParseResult(
                    value=store,
                    source_text=line,
                    line_index=line_idx,
                    metadata={'match_type': match_type}
                )
                self._log_result(result, context)
                return result

        self.logger.warning("No registered store found in header lines")
        return None

    def _match_line(self, line: str) -> Optional[Tuple[str, str]]:
        """Return (store, match type) for the first registry entry matching the line."""
        line_lower = line.lower()

        for store in self.config.stores:
            if store.lower() in line_lower:
                return store, 'exact'

        for store in self.config.stores:
            words = store.split()
            matched = [word for word in words if word.lower() in line_lower]
            # More than half of the name's words must appear
            if len(matched) > len(words) / 2:
                self.logger.debug(f"Fuzzy store match {store!r}: {matched}")
                return store, 'fuzzy'

        return None
