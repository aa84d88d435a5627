"""Constants for ethrevert.

This module defines the constant values used across the package,
including the ABI layout of ``Error(string)`` revert payloads, the
archive-node history window, and provider/poll defaults.
"""

# ABI Encoding Constants
ABI_SELECTOR_LENGTH = 4
ABI_WORD_LENGTH = 32
REVERT_SELECTOR = "0x08c379a0"
EMPTY_RESULT = "0x"

# Revert payload layout: [selector][offset word][length word][utf-8 data]
REVERT_LENGTH_START = 2 + (ABI_SELECTOR_LENGTH + ABI_WORD_LENGTH) * 2  # 74
REVERT_DATA_START = 2 + (ABI_SELECTOR_LENGTH + ABI_WORD_LENGTH + ABI_WORD_LENGTH) * 2  # 138

# Parity returns revert data as "Reverted 0x..." inside the RPC error object
PARITY_ERROR_DATA_PREFIX_LENGTH = 9

# Ethereum Constants
TX_HASH_PATTERN = r"0x[0-9a-fA-F]{64}"
ADDRESS_PATTERN = r"0x[0-9a-fA-F]{40}"
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
LATEST_BLOCK = "latest"

# Non-archive nodes keep roughly this many blocks of state
ARCHIVE_WINDOW_BLOCKS = 128
# Infura: "project ID does not have access to archive state"
ARCHIVE_REQUIRED_ERROR_CODE = -32002

# Network Constants
PROVIDER_TIMEOUT_SECONDS = 30
DEFAULT_REVERT_NETWORK = "ropsten"

# Receipt polling
DEFAULT_POLL_INTERVAL_SECONDS = 1.0

__all__ = [
    "ABI_SELECTOR_LENGTH",
    "ABI_WORD_LENGTH",
    "REVERT_SELECTOR",
    "EMPTY_RESULT",
    "REVERT_LENGTH_START",
    "REVERT_DATA_START",
    "PARITY_ERROR_DATA_PREFIX_LENGTH",
    "TX_HASH_PATTERN",
    "ADDRESS_PATTERN",
    "ZERO_ADDRESS",
    "LATEST_BLOCK",
    "ARCHIVE_WINDOW_BLOCKS",
    "ARCHIVE_REQUIRED_ERROR_CODE",
    "PROVIDER_TIMEOUT_SECONDS",
    "DEFAULT_REVERT_NETWORK",
    "DEFAULT_POLL_INTERVAL_SECONDS",
]
