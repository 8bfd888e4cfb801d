"""Review queue for receipts whose extraction should be checked by hand."""

import logging
from typing import Dict, List, Optional, Any
from dataclasses import dataclass
from pathlib import Path

from .models import ParsedReceipt
from .parsers.normalizer import is_text_usable

logger = logging.getLogger(__name__)

# Parses below this confidence are not accepted automatically
DEFAULT_CONFIDENCE_THRESHOLD = 0.4

SNIPPET_LENGTH = 200


@dataclass
class ReviewItem:
    """Represents a receipt that needs manual review."""
    file_path: str
    reason: str
    suggested_store: Optional[str] = None
    suggested_date: Optional[str] = None
    suggested_amount: Optional[float] = None
    raw_snippet: str = ""
    confidence: Optional[float] = None
    item_count: int = 0


class ReviewQueue:
    """Collects uncertain parses for manual correction."""

    def __init__(self, confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD):
        """
        Initialize review queue.

        Args:
            confidence_threshold: Minimum parse confidence accepted without review
        """
        self.items: List[ReviewItem] = []
        self.confidence_threshold = confidence_threshold

    def review_reasons(self, receipt: ParsedReceipt, ocr_text: str = "") -> List[str]:
        """List the reasons a parse is not trustworthy; empty when it is fine."""
        reasons = []

        if not is_text_usable(ocr_text):
            reasons.append("unreadable OCR text")
        if not receipt.store_name:
            reasons.append("missing store")
        if not receipt.date:
            reasons.append("missing date")
        if not receipt.total_amount:
            reasons.append("missing total")
        if not receipt.items:
            reasons.append("no items")
        if receipt.confidence < self.confidence_threshold:
            reasons.append(f"low confidence ({receipt.confidence:.2f})")

        return reasons

    def should_review(self, receipt: ParsedReceipt, file_path: str, ocr_text: str = "") -> bool:
        """
        Determine if a parsed receipt should be sent to review.

        Args:
            receipt: Parse result
            file_path: Source of the OCR text
            ocr_text: Raw OCR text

        Returns:
            True if item should be reviewed
        """
        reasons = self.review_reasons(receipt, ocr_text)
        if reasons:
            logger.info(f"Sending {Path(file_path).name} to review: {'; '.join(reasons)}")
            return True
        return False

    def add_item(self,
                 file_path: str,
                 reason: str,
                 suggested_store: Optional[str] = None,
                 suggested_date: Optional[str] = None,
                 suggested_amount: Optional[float] = None,
                 raw_snippet: str = "",
                 confidence: Optional[float] = None,
                 item_count: int = 0):
        """Add an item to the review queue."""
        item = ReviewItem(
            file_path=file_path,
            reason=reason,
            suggested_store=suggested_store,
            suggested_date=suggested_date,
            suggested_amount=suggested_amount,
            raw_snippet=raw_snippet,
            confidence=confidence,
            item_count=item_count
        )

        self.items.append(item)
        logger.debug(f"Added to review queue: {Path(file_path).name} - {reason}")

    def add_from_parse(self, file_path: str, receipt: ParsedReceipt, raw_text: str) -> bool:
        """
        Add a parsed receipt to review if its extraction is uncertain.

        Args:
            file_path: Path to the processed text file
            receipt: Parse result
            raw_text: Raw OCR text for the snippet

        Returns:
            True if the receipt was queued
        """
        if not self.should_review(receipt, file_path, raw_text):
            return False

        self.add_item(
            file_path=file_path,
            reason="; ".join(self.review_reasons(receipt, raw_text)),
            suggested_store=receipt.store_name or None,
            suggested_date=receipt.date or None,
            suggested_amount=receipt.total_amount or None,
            raw_snippet=make_snippet(raw_text),
            confidence=receipt.confidence,
            item_count=len(receipt.items)
        )
        return True

    def detect_conflicts(self, extractions: List[Dict[str, Any]]) -> List[ReviewItem]:
        """
        Detect potential duplicate receipts across a batch.

        Args:
            extractions: Receipt dicts with file_path, store_name, date and total_amount

        Returns:
            List of additional review items for conflicts
        """
        conflicts = []

        by_store_date: Dict[tuple, List[Dict[str, Any]]] = {}
        for extraction in extractions:
            key = (extraction.get('store_name', ''), extraction.get('date', ''))
            if not all(key):
                continue
            by_store_date.setdefault(key, []).append(extraction)

        for (store, date), group in by_store_date.items():
            if len(group) < 2:
                continue

            amounts = [item.get('total_amount', 0) for item in group if item.get('total_amount')]
            if len(amounts) < 2:
                continue

            max_amount = max(amounts)
            min_amount = min(amounts)
            # Totals within 3% are treated as the same purchase scanned twice
            if (max_amount - min_amount) / max_amount <= 0.03:
                for item in group:
                    conflicts.append(ReviewItem(
                        file_path=item.get('file_path', ''),
                        reason="Potential duplicate receipt",
                        suggested_store=store,
                        suggested_date=date,
                        suggested_amount=item.get('total_amount'),
                        raw_snippet=f"Similar to {len(group) - 1} other receipts: {store} on {date}"
                    ))

        return conflicts

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics for the review queue."""
        if not self.items:
            return {"total": 0}

        reason_counts: Dict[str, int] = {}
        missing_data = 0
        low_confidence = 0

        for item in self.items:
            for reason in item.reason.split(';'):
                reason = reason.strip()
                # Drop the score so low-confidence reasons group together
                reason = reason.split(' (')[0]
                reason_counts[reason] = reason_counts.get(reason, 0) + 1

            if 'missing' in item.reason or 'no items' in item.reason:
                missing_data += 1
            if 'low confidence' in item.reason:
                low_confidence += 1

        return {
            "total": len(self.items),
            "missing_data": missing_data,
            "low_confidence": low_confidence,
            "reason_breakdown": reason_counts
        }

    def clear(self):
        """Clear all items from the review queue."""
        self.items.clear()


def make_snippet(raw_text: str) -> str:
    """First characters of the OCR text on one line, without control characters."""
    snippet = raw_text.replace('\n', ' ')[:SNIPPET_LENGTH]
    snippet = ''.join(char for char in snippet if ord(char) >= 32 or char == '\t')
    if len(raw_text) > SNIPPET_LENGTH:
        snippet += "..."
    return snippet
