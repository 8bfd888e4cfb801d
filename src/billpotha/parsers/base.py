"""Base classes for receipt parsers."""

from abc import ABC, abstractmethod
from typing import Optional, Any, Dict, List
from dataclasses import dataclass, field
import logging

from ..config import ParserConfig
from .normalizer import normalize_lines

logger = logging.getLogger(__name__)


@dataclass
class ParseResult:
    """Result of a parsing operation with its source line and metadata."""
    value: Any
    source_text: str = ""
    line_index: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ReceiptContext:
    """Normalized view of one receipt's OCR text shared by all parsers."""
    full_text: str
    lines: List[str] = None

    def __post_init__(self):
        if self.full_text is None:
            self.full_text = ""
        if self.lines is None:
            self.lines = normalize_lines(self.full_text)

    def contains_keyword(self, line: str, keywords) -> bool:
        """Case-insensitive check for any keyword in the line."""
        line_lower = line.lower()
        return any(keyword.lower() in line_lower for keyword in keywords)


class BaseParser(ABC):
    """Base class for all receipt parsers."""

    def __init__(self, config: ParserConfig):
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        """
        Parse the specific field from receipt context.

        Args:
            context: Receipt context with normalized lines

        Returns:
            ParseResult with the extracted value, or None if nothing was found
        """
        pass

    def _log_result(self, result: Optional[ParseResult], context: ReceiptContext):
        """Log parsing result for debugging."""
        if result:
            self.logger.info(f"Parsed: {result.value!r} (line {result.line_index})")
        else:
            self.logger.warning(f"Parsing failed - no result in {len(context.lines)} lines")
