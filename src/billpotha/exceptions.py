"""Exceptions raised by the receipt parser package."""

from typing import Optional


class BillPothaError(Exception):
    """Base exception for the package."""


class ConfigurationError(BillPothaError):
    """Rules file is missing, unreadable or malformed."""

    def __init__(self, message: str, path: Optional[str] = None, key: Optional[str] = None):
        self.message = message
        self.path = path
        self.key = key
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Configuration error: {self.message}"
        if self.key:
            msg += f" (key: {self.key})"
        if self.path:
            msg += f" [{self.path}]"
        return msg
