"""Output records produced by the receipt parser."""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class ReceiptLineItem:
    """A purchased item detected on a single receipt line."""
    name: str
    unit_price: float
    quantity: int = 1
    line_index: int = 0  # position in the normalized line sequence

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'unit_price': self.unit_price,
            'quantity': self.quantity,
            'line_index': self.line_index,
        }


@dataclass(frozen=True)
class ParsedReceipt:
    """
    Structured result of parsing one receipt.

    Fields that could not be extracted keep their empty defaults, so every
    instance is well-typed. Items carry no identifiers; callers that store
    receipts address an item by its index in ``items``.
    """
    store_name: str = ""
    date: str = ""
    items: Tuple[ReceiptLineItem, ...] = field(default_factory=tuple)
    total_amount: float = 0.0
    confidence: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not (self.store_name or self.date or self.items or self.total_amount)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'store_name': self.store_name,
            'date': self.date,
            'items': [item.to_dict() for item in self.items],
            'total_amount': self.total_amount,
            'confidence': self.confidence,
        }
