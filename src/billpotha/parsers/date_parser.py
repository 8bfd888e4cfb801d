"""Purchase date extraction and normalization to DD-MM-YYYY."""

import re
import logging
from typing import Optional
from .base import BaseParser, ParseResult, ReceiptContext

logger = logging.getLogger(__name__)

DATE_FORMAT = re.compile(r'^\d{2}-\d{2}-\d{4}$')
SEPARATORS = ('/', '-', '.')


def normalize_date(date_str: str) -> str:
    """
    Normalize a matched date to DD-MM-YYYY.

    Year-first dates (YYYY-MM-DD and friends) are reordered; day and month
    are zero-padded. Text that does not split into day, month and a
    four-digit year returns an empty string.

    Examples:
        >>> normalize_date("5/1/2024")
        '05-01-2024'
        >>> normalize_date("2024 - 01 - 05")
        '05-01-2024'
    """
    if not date_str:
        return ""

    cleaned = re.sub(r'\s+', '', date_str)

    for sep in SEPARATORS:
        if sep not in cleaned:
            continue

        parts = cleaned.split(sep)
        if len(parts) != 3 or not all(part.isdigit() for part in parts):
            return ""

        if len(parts[0]) == 4:
            year, month, day = parts
        else:
            day, month, year = parts

        normalized = f"{day.zfill(2)}-{month.zfill(2)}-{year}"
        return normalized if DATE_FORMAT.match(normalized) else ""

    return ""


class DateParser(BaseParser):
    """Find the first configured date pattern on the earliest matching line."""

    def parse(self, context: ReceiptContext) -> Optional[ParseResult]:
        """
        Extract and normalize the purchase date.

        Args:
            context: Receipt context with normalized lines

        Returns:
            ParseResult with a DD-MM-YYYY string, or None
        """
        for line_idx, line in enumerate(context.lines):
            for pattern_idx, pattern in enumerate(self.config.date_patterns):
                match = pattern.search(line)
                if not match:
                    continue

                date_str = normalize_date(match.group())
                if not date_str:
                    self.logger.debug(f"Unusable date match {match.group()!r} in line {line_idx}")
                    continue

                result = ParseResult(
                    value=date_str,
                    source_text=line,
                    line_index=line_idx,
                    metadata={
                        'pattern_index': pattern_idx,
                        'original_match': match.group()
                    }
                )
                self._log_result(result, context)
                return result

        self.logger.warning("No valid date found in text")
        return None
