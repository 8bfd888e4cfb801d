"""Receipt parsing engine: OCR text in, ParsedReceipt out."""

import logging
from typing import Optional
from .config import ParserConfig, default_config
from .models import ParsedReceipt
from .parsers import StoreNameParser, DateParser, AmountParser, ItemParser, deduplicate_items
from .parsers.base import ReceiptContext
from .scoring import calculate_confidence

logger = logging.getLogger(__name__)


class ReceiptParser:
    """
    Rule-based receipt parser built from one parser per field.

    The parser keeps nothing between calls apart from its read-only rules,
    so a single instance can be shared across threads.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        """Initialize field parsers with the given rules (packaged rules by default)."""
        self.config = config or default_config()
        self.store_parser = StoreNameParser(self.config)
        self.date_parser = DateParser(self.config)
        self.amount_parser = AmountParser(self.config)
        self.item_parser = ItemParser(self.config)

        logger.debug(f"Initialized receipt parser with {len(self.config.stores)} stores")

    def parse_receipt(self, text: Optional[str]) -> ParsedReceipt:
        """
        Parse a complete receipt.

        Args:
            text: Raw OCR text from the receipt

        Returns:
            ParsedReceipt; missing fields keep their empty defaults
        """
        context = ReceiptContext(full_text=text or "")

        store_result = self.store_parser.parse(context)
        date_result = self.date_parser.parse(context)
        amount_result = self.amount_parser.parse(context)
        items_result = self.item_parser.parse(context)

        store_name = store_result.value if store_result else ""
        date = date_result.value if date_result else ""
        total_amount = amount_result.value if amount_result else 0.0
        items = deduplicate_items(items_result.value) if items_result else []

        confidence = calculate_confidence(
            store_name=store_name,
            date=date,
            total_amount=total_amount,
            items=items,
            stores=self.config.stores,
        )

        receipt = ParsedReceipt(
            store_name=store_name,
            date=date,
            items=tuple(items),
            total_amount=total_amount,
            confidence=confidence,
        )

        logger.info(f"Parsed receipt: store={store_name!r}, date={date!r}, "
                    f"total=Rs.{total_amount:,.2f}, items={len(items)}, confidence={confidence:.2f}")
        return receipt


def parse(text: Optional[str], config: Optional[ParserConfig] = None) -> ParsedReceipt:
    """Parse OCR text with the given rules; see ReceiptParser.parse_receipt."""
    return ReceiptParser(config).parse_receipt(text)
