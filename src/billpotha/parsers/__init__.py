"""Receipt parsing components - one parser per extracted field."""

from .store_parser import StoreNameParser
from .date_parser import DateParser, normalize_date
from .amount_parser import AmountParser, extract_prices
from .item_parser import ItemParser, extract_quantity
from .deduplicator import deduplicate_items, are_similar_items
from .normalizer import normalize_lines, is_text_usable

__all__ = [
    'StoreNameParser',
    'DateParser',
    'AmountParser',
    'ItemParser',
    'normalize_date',
    'extract_prices',
    'extract_quantity',
    'deduplicate_items',
    'are_similar_items',
    'normalize_lines',
    'is_text_usable',
]
