"""
Shared fixtures for ethrevert tests.
"""

from typing import Any, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
from eth_abi import encode

from ethrevert.models import ContractMethod
from ethrevert.registry import load_abi


# =============================================================================
# Test Constants
# =============================================================================

VALID_TX_HASH = "0x" + "ab" * 32
VALID_SENDER = "0x1234567890123456789012345678901234567890"
CONTRACT_ADDRESS = "0xabcdefabcdefabcdefabcdefabcdefabcdefabcd"

REPLAYED_TX: Dict[str, Any] = {
    "hash": VALID_TX_HASH,
    "from": VALID_SENDER,
    "to": CONTRACT_ADDRESS,
    "input": "0x6057361d0000000000000000000000000000000000000000000000000000000000000007",
    "value": 0,
    "gas": 100_000,
    "nonce": 3,
    "blockNumber": 990,
}


def revert_payload(reason: str) -> str:
    """ABI-encode ``reason`` as an ``Error(string)`` revert payload."""
    return "0x08c379a0" + encode(["string"], [reason]).hex()


def parity_error_data(reason: str) -> str:
    """Revert data the way Parity puts it in the RPC error object."""
    return "Reverted " + revert_payload(reason)


def receipt(status: Any, tx_hash: str = VALID_TX_HASH) -> Dict[str, Any]:
    return {
        "transactionHash": bytes.fromhex(tx_hash[2:]),
        "status": status,
        "blockNumber": 990,
        "blockHash": b"\x01" * 32,
        "gasUsed": 42_000,
        "logs": [],
    }


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def provider() -> MagicMock:
    """ChainProvider stand-in with every coroutine mocked."""
    p = MagicMock()
    p.call = AsyncMock(return_value="0x")
    p.get_transaction = AsyncMock(return_value=dict(REPLAYED_TX))
    p.get_transaction_receipt = AsyncMock(return_value=None)
    p.get_block_number = AsyncMock(return_value=1_000)
    p.get_balance = AsyncMock(return_value=0)
    p.send_transaction = AsyncMock(return_value=VALID_TX_HASH)
    p.estimate_gas = AsyncMock(return_value=21_000)
    return p


@pytest.fixture
def simple_abi():
    return load_abi("simple.json")


@pytest.fixture
def calls_method(simple_abi) -> ContractMethod:
    return ContractMethod(
        name="getCalls",
        signature="getCalls()",
        address=CONTRACT_ADDRESS,
        abi=simple_abi,
    )


@pytest.fixture
def number_method(simple_abi) -> ContractMethod:
    return ContractMethod(
        name="testNumber",
        signature="testNumber(uint256)",
        address=CONTRACT_ADDRESS,
        abi=simple_abi,
    )
