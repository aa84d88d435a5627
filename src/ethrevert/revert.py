"""Revert reason recovery.

Replays a failed transaction as a read-only call against the chain state
at (or near) the block it was mined in, then decodes the returned
``Error(string)`` payload.

Two wire conventions are supported:

- Standard clients return the ABI-encoded revert payload from
  ``eth_call`` (or, on newer nodes, in the ``data`` member of an
  "execution reverted" RPC error).
- Parity/OpenEthereum (Kovan) returns it inside the RPC error object as
  ``"Reverted 0x..."``, and its padding cannot be relied on, so the
  string length word is read explicitly.

The convention is chosen once per network by ``strategy_for``.

Example:
    >>> resolver = RevertReasonResolver()
    >>> reason = await resolver.resolve("0x6ea1...", network="mainnet")
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Tuple, Union

from .config import NETWORKS, Network
from .constants import (
    ARCHIVE_REQUIRED_ERROR_CODE,
    ARCHIVE_WINDOW_BLOCKS,
    EMPTY_RESULT,
    LATEST_BLOCK,
    PARITY_ERROR_DATA_PREFIX_LENGTH,
    REVERT_DATA_START,
    REVERT_LENGTH_START,
    REVERT_SELECTOR,
    ZERO_ADDRESS,
)
from .errors import (
    ArchiveRequiredError,
    DecodeFailure,
    FutureBlockError,
    InvalidInputError,
    ProviderError,
    UnsupportedProviderError,
)
from .providers import BlockIdentifier, ChainProvider, get_default_provider
from .utils.logging import get_logger
from .utils.validation import BlockNumber, normalize_block_number, validate_tx_hash

__all__ = [
    "RevertStrategy",
    "StandardRevertStrategy",
    "ParityRevertStrategy",
    "strategy_for",
    "decode_revert_reason",
    "replay_params",
    "RevertReasonResolver",
]

_logger = get_logger(__name__)

ProviderFactory = Callable[[Network], ChainProvider]


def _prefixed(code: Any) -> str:
    if isinstance(code, (bytes, bytearray)):
        return "0x" + bytes(code).hex()
    code = str(code)
    return code if code.startswith("0x") else "0x" + code


def _hex_to_utf8(hex_str: str) -> str:
    # Truncated encodings may leave an odd number of nibbles
    if len(hex_str) % 2 == 1:
        hex_str += "0"
    return bytes.fromhex(hex_str).decode("utf-8")


class RevertStrategy:
    """How a network family surfaces and encodes revert data."""

    name = "base"
    # Whether the provider's capability must be proven by a trial replay
    probe_before_replay = False

    async def replay(self, provider: ChainProvider, tx: Dict[str, Any], block: BlockIdentifier) -> str:
        raise NotImplementedError

    def decode(self, code: str) -> str:
        raise NotImplementedError


class StandardRevertStrategy(RevertStrategy):
    """Geth-style clients: the revert payload is the call's return data."""

    name = "standard"

    async def replay(self, provider: ChainProvider, tx: Dict[str, Any], block: BlockIdentifier) -> str:
        try:
            return await provider.call(tx, block)
        except ProviderError as e:
            data = e.data.get("data") if isinstance(e.data, dict) else e.data
            if isinstance(data, str) and data.startswith(REVERT_SELECTOR):
                return data
            raise

    def decode(self, code: str) -> str:
        # Skip selector, offset and length words; trailing zeros are padding
        hex_str = _prefixed(code)[REVERT_DATA_START:].rstrip("0")
        return _hex_to_utf8(hex_str)


class ParityRevertStrategy(RevertStrategy):
    """Parity/OpenEthereum: revert data is carried in the RPC error object."""

    name = "parity"
    probe_before_replay = True

    async def replay(self, provider: ChainProvider, tx: Dict[str, Any], block: BlockIdentifier) -> str:
        try:
            return await provider.call(tx, block)
        except ProviderError as e:
            if not isinstance(e.data, str):
                raise
            return e.data[PARITY_ERROR_DATA_PREFIX_LENGTH:]

    def decode(self, code: str) -> str:
        code = _prefixed(code)
        if code == EMPTY_RESULT:
            return ""
        length = int(code[REVERT_LENGTH_START:REVERT_DATA_START], 16)
        hex_str = code[REVERT_DATA_START : REVERT_DATA_START + length * 2]
        return _hex_to_utf8(hex_str)


_STANDARD = StandardRevertStrategy()
_PARITY = ParityRevertStrategy()


def strategy_for(network: Union[Network, str]) -> RevertStrategy:
    """Select the revert convention used by ``network``."""
    return _PARITY if NETWORKS[Network(network)].parity_error_data else _STANDARD


def decode_revert_reason(code: str, network: Union[Network, str] = Network.MAINNET) -> str:
    """Decode a raw ``Error(string)`` payload with the convention of ``network``.

    Raises:
        ValueError: If ``code`` is not valid hex
        UnicodeDecodeError: If the reason bytes are not valid UTF-8
    """
    return strategy_for(network).decode(code)


def replay_params(tx: Dict[str, Any]) -> Dict[str, Any]:
    """Turn a fetched transaction into ``eth_call`` parameters."""
    params = {
        "from": tx.get("from"),
        "to": tx.get("to"),
        "data": tx.get("input", tx.get("data")),
        "value": tx.get("value"),
        "gas": tx.get("gas"),
    }
    return {key: value for key, value in params.items() if value is not None}


class RevertReasonResolver:
    """Recover the revert reason of a failed transaction.

    Args:
        provider: Provider to replay against. When omitted, one is built
            with ``provider_factory`` the first time a network is
            requested and reused afterwards.
        provider_factory: Builds a provider for a network (defaults to the
            network's public endpoint).
    """

    def __init__(
        self,
        provider: Optional[ChainProvider] = None,
        provider_factory: ProviderFactory = get_default_provider,
    ) -> None:
        self._provider = provider
        self._provider_factory = provider_factory
        self._providers: Dict[Network, ChainProvider] = {}

    async def resolve(
        self,
        tx_hash: str,
        network: Union[Network, str] = Network.MAINNET,
        block_number: Optional[BlockNumber] = None,
    ) -> str:
        """Replay ``tx_hash`` and decode its revert reason.

        Args:
            tx_hash: Hash of the failed transaction
            network: Network the transaction was sent on
            block_number: Block to replay at (defaults to "latest")

        Returns:
            Decoded revert reason

        Raises:
            InvalidInputError: If the hash, network or block is malformed
            UnsupportedProviderError: If a Kovan provider cannot return revert data
            FutureBlockError: If the block has not been mined yet
            ArchiveRequiredError: If the block needs an archive node
            DecodeFailure: If replaying or decoding fails
        """
        network_name, block = self._normalize_input(network, block_number)
        network_id = self._validate_input_pre_provider(tx_hash, network_name)
        provider = self._get_provider(network_id)
        strategy = strategy_for(network_id)
        await self._validate_input_post_provider(tx_hash, block, provider, strategy)

        _logger.debug(
            "Replaying transaction",
            extra={"tx_hash": tx_hash, "network": network_id.value, "block": block, "strategy": strategy.name},
        )
        try:
            tx = await provider.get_transaction(tx_hash)
            code = await strategy.replay(provider, replay_params(tx), block)
            reason = strategy.decode(code)
        except Exception as e:
            _logger.debug(
                "Revert decoding failed",
                extra={"tx_hash": tx_hash, "network": network_id.value, "error": str(e)},
            )
            raise DecodeFailure(
                tx_hash=tx_hash,
                details={"network": network_id.value, "cause": str(e)},
            ) from e

        _logger.info("Revert reason decoded", extra={"tx_hash": tx_hash, "network": network_id.value})
        return reason

    # ------------------------------------------------------------------
    # Pipeline stages
    # ------------------------------------------------------------------
    @staticmethod
    def _normalize_input(
        network: Union[Network, str], block_number: Optional[BlockNumber]
    ) -> Tuple[str, BlockIdentifier]:
        if isinstance(network, Network):
            network = network.value
        if not isinstance(network, str):
            raise InvalidInputError("Not a valid network", field="network", value=network)
        return network.lower(), normalize_block_number(block_number)

    @staticmethod
    def _validate_input_pre_provider(tx_hash: str, network: str) -> Network:
        validate_tx_hash(tx_hash)
        try:
            return Network(network)
        except ValueError:
            raise InvalidInputError("Not a valid network", field="network", value=network) from None

    def _get_provider(self, network: Network) -> ChainProvider:
        if self._provider is not None:
            return self._provider
        if network not in self._providers:
            self._providers[network] = self._provider_factory(network)
        return self._providers[network]

    async def _validate_input_post_provider(
        self,
        tx_hash: str,
        block: BlockIdentifier,
        provider: ChainProvider,
        strategy: RevertStrategy,
    ) -> None:
        # Only a trial replay tells whether the node exposes Parity's call data.
        # The result is discarded and the replay stage runs again.
        if strategy.probe_before_replay:
            try:
                tx = await provider.get_transaction(tx_hash)
                await strategy.replay(provider, replay_params(tx), block)
            except Exception as e:
                raise UnsupportedProviderError(tx_hash=tx_hash, details={"cause": str(e)}) from e

        if block == LATEST_BLOCK:
            return

        current = await provider.get_block_number()
        if block >= current:
            raise FutureBlockError(block, current, tx_hash=tx_hash)

        if block < current - ARCHIVE_WINDOW_BLOCKS:
            try:
                await provider.get_balance(ZERO_ADDRESS, block)
            except ProviderError as e:
                if e.rpc_code == ARCHIVE_REQUIRED_ERROR_CODE:
                    raise ArchiveRequiredError(block, tx_hash=tx_hash) from e
                _logger.warning(
                    "Archive probe failed",
                    extra={"tx_hash": tx_hash, "block": block, "rpc_code": e.rpc_code, "error": e.message},
                )
