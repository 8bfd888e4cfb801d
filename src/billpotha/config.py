"""Parsing rules: merchant registry, keywords and regex patterns loaded from YAML."""

import re
import yaml
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern, Tuple, Union

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path(__file__).parent / "rules" / "sri_lanka.yml"

REQUIRED_KEYS = (
    'stores',
    'total_keywords',
    'date_patterns',
    'price_patterns',
    'quantity_patterns',
)

PATTERN_KEYS = ('date_patterns', 'price_patterns', 'quantity_patterns')


@dataclass(frozen=True)
class ParserConfig:
    """Read-only rules shared by every parsing stage."""
    stores: Tuple[str, ...]
    total_keywords: Tuple[str, ...]
    date_patterns: Tuple[Pattern, ...]
    price_patterns: Tuple[Pattern, ...]
    quantity_patterns: Tuple[Pattern, ...]

    @classmethod
    def from_dict(cls, rules: Dict[str, Any], source: Optional[str] = None) -> 'ParserConfig':
        """
        Build a config from a rules mapping.

        Args:
            rules: Mapping with the keys listed in REQUIRED_KEYS
            source: Where the rules came from, used in error messages

        Returns:
            ParserConfig with compiled patterns
        """
        if not isinstance(rules, dict):
            raise ConfigurationError("rules must be a mapping", path=source)

        values = {}
        for key in REQUIRED_KEYS:
            entries = rules.get(key)
            if not entries or not isinstance(entries, list):
                raise ConfigurationError("expected a non-empty list", path=source, key=key)
            if not all(isinstance(entry, str) and entry.strip() for entry in entries):
                raise ConfigurationError("entries must be non-empty strings", path=source, key=key)

            if key in PATTERN_KEYS:
                values[key] = tuple(_compile(entry, key, source) for entry in entries)
            else:
                values[key] = tuple(entry.strip() for entry in entries)

        return cls(**values)

    def with_stores(self, stores: List[str]) -> 'ParserConfig':
        """Return a copy with a different merchant registry."""
        return ParserConfig(
            stores=tuple(stores),
            total_keywords=self.total_keywords,
            date_patterns=self.date_patterns,
            price_patterns=self.price_patterns,
            quantity_patterns=self.quantity_patterns,
        )


def _compile(pattern: str, key: str, source: Optional[str]) -> Pattern:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ConfigurationError(f"invalid pattern {pattern!r}: {e}", path=source, key=key) from e


def load_config(rules_path: Optional[Union[str, Path]] = None) -> ParserConfig:
    """
    Load parsing rules from a YAML file.

    Args:
        rules_path: Path to a rules file; the packaged Sri Lankan rules when omitted

    Returns:
        ParserConfig built from the file
    """
    path = Path(rules_path) if rules_path else DEFAULT_RULES_PATH

    try:
        with open(path, 'r', encoding='utf-8') as f:
            rules = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load parsing rules from {path}: {e}")
        raise ConfigurationError(str(e), path=str(path)) from e

    config = ParserConfig.from_dict(rules, source=str(path))
    logger.info(f"Loaded parsing rules from {path.name}: {len(config.stores)} stores, "
                f"{len(config.total_keywords)} total keywords")
    return config


@lru_cache(maxsize=1)
def default_config() -> ParserConfig:
    """Packaged rules, loaded once per process."""
    return load_config()
