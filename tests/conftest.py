"""Shared fixtures for the receipt parser tests."""

import sys
from pathlib import Path

import pytest

# Allow running the suite from a source checkout without installing
SRC_DIR = Path(__file__).parent.parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from billpotha.config import default_config  # noqa: E402


SAMPLE_RECEIPT = """
CARGILLS (CEYLON) PLC
Cargills Food City - Kandy
Date: 05/01/2024  Time: 10:32

Milk Powder 400g Rs. 550.00
Bread 2x Rs. 200.50
Sugar 1kg........Rs. 240.00
Sub Total Rs. 990.50
TOTAL Rs. 1,250.50
"""


@pytest.fixture
def config():
    return default_config()


@pytest.fixture
def sample_receipt_text():
    return SAMPLE_RECEIPT
