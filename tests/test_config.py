"""Tests for parsing rules loading."""

import dataclasses
import re

import pytest
from billpotha.config import ParserConfig, load_config, default_config
from billpotha.exceptions import ConfigurationError

MINIMAL_RULES = """
stores:
  - Super Mart
total_keywords:
  - Amount Due
date_patterns:
  - '\\d{1,2}/\\d{1,2}/\\d{4}'
price_patterns:
  - 'USD\\s*(\\d+(?:\\.\\d{2})?)'
quantity_patterns:
  - '(?i)(\\d+)\\s*pcs'
"""


def write_rules(tmp_path, content):
    path = tmp_path / "rules.yml"
    path.write_text(content, encoding="utf-8")
    return path


class TestDefaultConfig:
    """Test suite for the packaged rules."""

    def test_packaged_rules(self):
        config = load_config()

        assert config.stores[0] == "Cargills"
        assert "House of Fashion" in config.stores
        assert len(config.stores) == 11
        assert "Grand Total" in config.total_keywords
        assert "மொத்தம்" in config.total_keywords
        assert all(isinstance(p, re.Pattern) for p in config.date_patterns)
        assert len(config.price_patterns) == 3
        assert len(config.quantity_patterns) == 4

    def test_default_config_is_loaded_once(self):
        assert default_config() is default_config()

    def test_config_is_read_only(self):
        config = default_config()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.stores = ("Other",)

    def test_with_stores_returns_copy(self):
        config = default_config()

        custom = config.with_stores(["Super Mart"])

        assert custom.stores == ("Super Mart",)
        assert custom.price_patterns == config.price_patterns
        assert config.stores[0] == "Cargills"


class TestLoadConfig:
    """Test suite for custom rules files."""

    def test_custom_rules_file(self, tmp_path):
        config = load_config(write_rules(tmp_path, MINIMAL_RULES))

        assert config.stores == ("Super Mart",)
        assert config.total_keywords == ("Amount Due",)
        assert config.price_patterns[0].search("USD 12.50").group(1) == "12.50"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(tmp_path / "missing.yml")

        assert "missing.yml" in str(exc_info.value)

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(write_rules(tmp_path, "stores: [unclosed"))

    def test_missing_key(self, tmp_path):
        content = MINIMAL_RULES.replace("total_keywords:\n  - Amount Due\n", "")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(write_rules(tmp_path, content))

        assert exc_info.value.key == "total_keywords"

    def test_invalid_pattern(self, tmp_path):
        content = MINIMAL_RULES.replace("'(?i)(\\d+)\\s*pcs'", "'(unclosed'")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(write_rules(tmp_path, content))

        assert exc_info.value.key == "quantity_patterns"

    def test_rules_must_be_mapping(self):
        with pytest.raises(ConfigurationError):
            ParserConfig.from_dict(["Cargills"])
