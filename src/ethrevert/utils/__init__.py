"""
ethrevert utilities.

This module provides logging and validation helpers for the package.
"""

from ethrevert.utils.logging import configure_logging, get_logger, set_level
from ethrevert.utils.validation import (
    normalize_block_number,
    validate_address,
    validate_tx_hash,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_level",
    # Validation
    "validate_tx_hash",
    "validate_address",
    "normalize_block_number",
]
