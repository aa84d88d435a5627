"""Chain-state provider boundary.

The core only talks to the chain through the ``ChainProvider`` protocol.
``Web3ChainProvider`` is the default implementation on top of
``AsyncWeb3``; tests and embedding applications may supply any object
with the same coroutine methods.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Union

from web3 import AsyncWeb3, Web3
from web3.exceptions import TransactionNotFound

from .config import Network, get_network_config
from .constants import LATEST_BLOCK, PROVIDER_TIMEOUT_SECONDS
from .errors import ProviderError
from .utils.logging import get_logger

__all__ = ["BlockIdentifier", "ChainProvider", "Web3ChainProvider", "get_default_provider"]

_logger = get_logger(__name__)

BlockIdentifier = Union[int, str]

_ADDRESS_FIELDS = ("from", "to")


class ChainProvider(Protocol):
    """Asynchronous chain-state operations used by the client."""

    async def call(self, tx: Dict[str, Any], block_identifier: BlockIdentifier = LATEST_BLOCK) -> str:
        ...

    async def get_transaction(self, tx_hash: str) -> Dict[str, Any]:
        ...

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        ...

    async def get_block_number(self) -> int:
        ...

    async def get_balance(self, address: str, block_identifier: BlockIdentifier = LATEST_BLOCK) -> int:
        ...

    async def send_transaction(self, tx: Dict[str, Any]) -> str:
        ...

    async def estimate_gas(self, tx: Dict[str, Any]) -> int:
        ...


def _rpc_error_payload(exc: BaseException) -> Dict[str, Any]:
    # web3 v7 keeps the JSON-RPC response, v6 raises ValueError(dict)
    response = getattr(exc, "rpc_response", None)
    if isinstance(response, dict) and isinstance(response.get("error"), dict):
        return response["error"]
    if exc.args and isinstance(exc.args[0], dict):
        return exc.args[0]
    return {}


def to_provider_error(exc: BaseException) -> ProviderError:
    """Translate a web3/transport exception into a ProviderError."""
    payload = _rpc_error_payload(exc)
    data = payload.get("data")
    if data is None:
        # ContractLogicError exposes the revert data directly
        data = getattr(exc, "data", None)
    message = payload.get("message") or str(exc) or exc.__class__.__name__
    return ProviderError(message, rpc_code=payload.get("code"), data=data)


def _hex(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value)


def _checksummed(tx: Dict[str, Any]) -> Dict[str, Any]:
    params = dict(tx)
    for key in _ADDRESS_FIELDS:
        if params.get(key):
            params[key] = Web3.to_checksum_address(params[key])
    return params


class Web3ChainProvider:
    """ChainProvider backed by an ``AsyncWeb3`` instance.

    Byte values are returned as 0x-prefixed hex strings and mappings as
    plain dicts. Every failure surfaces as ``ProviderError`` with the
    JSON-RPC ``code``/``data`` preserved when the node supplied them.
    """

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        web3: Optional[AsyncWeb3] = None,
        timeout: int = PROVIDER_TIMEOUT_SECONDS,
    ) -> None:
        if web3 is None and not rpc_url:
            raise ValueError("rpc_url or web3 is required")
        self.rpc_url = rpc_url
        self.w3 = web3 or AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))

    async def call(self, tx: Dict[str, Any], block_identifier: BlockIdentifier = LATEST_BLOCK) -> str:
        try:
            result = await self.w3.eth.call(_checksummed(tx), block_identifier)
        except Exception as e:
            raise to_provider_error(e) from e
        return _hex(result)

    async def get_transaction(self, tx_hash: str) -> Dict[str, Any]:
        try:
            return dict(await self.w3.eth.get_transaction(tx_hash))
        except Exception as e:
            raise to_provider_error(e) from e

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[Dict[str, Any]]:
        try:
            receipt = await self.w3.eth.get_transaction_receipt(tx_hash)
        except TransactionNotFound:
            return None
        except Exception as e:
            raise to_provider_error(e) from e
        return dict(receipt) if receipt else None

    async def get_block_number(self) -> int:
        try:
            return int(await self.w3.eth.block_number)
        except Exception as e:
            raise to_provider_error(e) from e

    async def get_balance(self, address: str, block_identifier: BlockIdentifier = LATEST_BLOCK) -> int:
        try:
            return int(await self.w3.eth.get_balance(Web3.to_checksum_address(address), block_identifier))
        except Exception as e:
            raise to_provider_error(e) from e

    async def send_transaction(self, tx: Dict[str, Any]) -> str:
        try:
            tx_hash = await self.w3.eth.send_transaction(_checksummed(tx))
        except Exception as e:
            raise to_provider_error(e) from e
        return _hex(tx_hash)

    async def estimate_gas(self, tx: Dict[str, Any]) -> int:
        try:
            return int(await self.w3.eth.estimate_gas(_checksummed(tx)))
        except Exception as e:
            raise to_provider_error(e) from e


def get_default_provider(
    network: Union[Network, str],
    rpc_url: Optional[str] = None,
    timeout: int = PROVIDER_TIMEOUT_SECONDS,
) -> Web3ChainProvider:
    """Read-only provider on the canonical public endpoint of ``network``."""
    config = get_network_config(network, rpc_url)
    _logger.debug("Creating default provider", extra={"network": config.name.value})
    return Web3ChainProvider(config.rpc_url, timeout=timeout)
