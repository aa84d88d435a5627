"""
Validation utilities for ethrevert.

Provides input validation functions for:
- Transaction hashes
- Ethereum addresses
- Block numbers / block tags

All validation functions raise InvalidInputError on failure.
"""

from __future__ import annotations

import re
from typing import Optional, Union

from ethrevert.constants import ADDRESS_PATTERN, LATEST_BLOCK, TX_HASH_PATTERN
from ethrevert.errors import InvalidInputError

BlockNumber = Union[int, str]


def validate_tx_hash(tx_hash: str, field_name: str = "tx_hash") -> str:
    """
    Validate transaction hash format.

    Args:
        tx_hash: Hash to validate (0x followed by 64 hex characters)
        field_name: Field name for error messages

    Returns:
        The hash, unchanged

    Raises:
        InvalidInputError: If the hash is malformed
    """
    if not isinstance(tx_hash, str) or not re.fullmatch(TX_HASH_PATTERN, tx_hash):
        raise InvalidInputError("Invalid transaction hash", field=field_name, value=tx_hash)
    return tx_hash


def validate_address(address: str, field_name: str = "address") -> str:
    """
    Validate Ethereum address format.

    Args:
        address: Address to validate
        field_name: Field name for error messages

    Returns:
        The address, unchanged

    Raises:
        InvalidInputError: If address is invalid
    """
    if not isinstance(address, str) or not re.fullmatch(ADDRESS_PATTERN, address):
        raise InvalidInputError(
            f"{field_name} must be 0x followed by 40 hex characters",
            field=field_name,
            value=address,
        )
    return address


def normalize_block_number(block_number: Optional[BlockNumber]) -> BlockNumber:
    """
    Normalize a block identifier.

    ``None`` and ``"latest"`` map to ``"latest"``; ints and decimal or
    0x-prefixed hex strings map to ints.

    Raises:
        InvalidInputError: If the value is not a block number
    """
    if block_number is None or block_number == LATEST_BLOCK:
        return LATEST_BLOCK

    if isinstance(block_number, bool):
        raise InvalidInputError("Invalid block number", field="block_number", value=block_number)
    if isinstance(block_number, int):
        value = block_number
    elif isinstance(block_number, str):
        text = block_number.strip().lower()
        try:
            value = int(text, 16) if text.startswith("0x") else int(text)
        except ValueError:
            raise InvalidInputError("Invalid block number", field="block_number", value=block_number) from None
    else:
        raise InvalidInputError("Invalid block number", field="block_number", value=block_number)

    if value < 0:
        raise InvalidInputError("Block number cannot be negative", field="block_number", value=block_number)
    return value
