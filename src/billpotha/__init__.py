"""Bill Potha - extract structured data from Sri Lankan receipt OCR text."""

__version__ = "1.0.0"

from .config import ParserConfig, load_config, default_config
from .exceptions import BillPothaError, ConfigurationError
from .models import ParsedReceipt, ReceiptLineItem
from .engine import ReceiptParser, parse
from .scoring import calculate_confidence

__all__ = [
    'ParserConfig',
    'load_config',
    'default_config',
    'BillPothaError',
    'ConfigurationError',
    'ParsedReceipt',
    'ReceiptLineItem',
    'ReceiptParser',
    'parse',
    'calculate_confidence',
]
