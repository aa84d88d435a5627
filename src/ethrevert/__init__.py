"""
ethrevert - async Ethereum contract client with revert reason recovery.

Quick Start:
    >>> import asyncio
    >>> from ethrevert import ChainClient, MethodRegistry, Network, load_abi
    >>>
    >>> async def main():
    ...     client = ChainClient.from_network(Network.MAINNET, rpc_url="https://...")
    ...     methods = MethodRegistry.from_abi("0x...", load_abi("simple.json"))
    ...     tx_hash = await client.send_transaction("0x...", methods.get("testNumber"), 7)
    ...     receipt = await client.wait_for_receipt(tx_hash)
    ...     print(receipt.revert_reason)
    ...
    >>> asyncio.run(main())

Modules:
- `client`: ChainClient (calls, submissions, receipt polling)
- `revert`: RevertReasonResolver and revert payload decoding
- `registry`: ABI lookup and method registry
- `providers`: ChainProvider protocol and the web3 implementation
- `errors`: Exception hierarchy
- `utils`: Logging and validation helpers
"""

__version__ = "0.1.0"

from .abi import decode_outputs, encode_function_call, encode_method_call, encode_selector
from .client import ChainClient
from .config import NETWORKS, Network, NetworkConfig, PollingConfig, get_network_config
from .errors import (
    ArchiveRequiredError,
    DecodeFailure,
    EthRevertError,
    FutureBlockError,
    InvalidInputError,
    NotFoundError,
    PollCancelledError,
    ProviderError,
    ReceiptTimeoutError,
    SchemaError,
    UnsupportedProviderError,
)
from .models import ContractMethod, TransactionReceipt
from .providers import ChainProvider, Web3ChainProvider, get_default_provider
from .registry import MethodRegistry, find_in_abi, load_abi
from .revert import (
    ParityRevertStrategy,
    RevertReasonResolver,
    StandardRevertStrategy,
    decode_revert_reason,
    strategy_for,
)

__all__ = [
    "__version__",
    # Client
    "ChainClient",
    # Revert recovery
    "RevertReasonResolver",
    "StandardRevertStrategy",
    "ParityRevertStrategy",
    "decode_revert_reason",
    "strategy_for",
    # Providers
    "ChainProvider",
    "Web3ChainProvider",
    "get_default_provider",
    # Config
    "Network",
    "NetworkConfig",
    "NETWORKS",
    "PollingConfig",
    "get_network_config",
    # Models
    "ContractMethod",
    "TransactionReceipt",
    # Registry / ABI
    "MethodRegistry",
    "find_in_abi",
    "load_abi",
    "encode_selector",
    "encode_function_call",
    "encode_method_call",
    "decode_outputs",
    # Errors
    "EthRevertError",
    "NotFoundError",
    "SchemaError",
    "InvalidInputError",
    "UnsupportedProviderError",
    "FutureBlockError",
    "ArchiveRequiredError",
    "DecodeFailure",
    "ProviderError",
    "ReceiptTimeoutError",
    "PollCancelledError",
]
