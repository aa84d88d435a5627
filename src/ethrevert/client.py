"""Async chain client for Python.

This module provides the ChainClient class for calling contract
methods, submitting transactions and waiting for their receipts on an
Ethereum-compatible chain.

The client supports:
- Read-only contract calls with ABI-decoded results
- Transaction submission through the node's account
- Receipt polling with a fixed interval, attempt limit and cancellation
- Revert reason recovery for failed transactions

Example:
    >>> from ethrevert import ChainClient, ContractMethod, Network
    >>> client = ChainClient.from_network(Network.MAINNET, rpc_url="https://...")
    >>> tx_hash = await client.send_transaction("0x...", method, 42)
    >>> receipt = await client.wait_for_receipt(tx_hash)
    >>> if receipt.failed:
    ...     print(receipt.revert_reason)
"""
import asyncio
from typing import Any, Dict, FrozenSet, Optional, Set, Union

from .abi import decode_outputs, encode_method_call
from .config import Network, PollingConfig, get_network_config
from .constants import DEFAULT_REVERT_NETWORK, EMPTY_RESULT, LATEST_BLOCK, PROVIDER_TIMEOUT_SECONDS
from .errors import PollCancelledError, ReceiptTimeoutError
from .models import ContractMethod, TransactionReceipt
from .providers import ChainProvider, Web3ChainProvider
from .revert import RevertReasonResolver
from .utils.logging import get_logger
from .utils.validation import BlockNumber, validate_address

__all__ = ["ChainClient"]

_logger = get_logger(__name__)


class ChainClient:
    """Contract call, transaction and receipt client.

    One instance is built at application start and passed to the code
    that needs it; the provider is bound here and never replaced.

    Args:
        provider: Chain-state provider used for calls, submissions and receipts
        polling: Receipt polling configuration
        resolver: Revert reason resolver (defaults to one using each
            network's public endpoint)
        revert_network: Network passed to the resolver for failed receipts
    """

    def __init__(
        self,
        provider: ChainProvider,
        polling: Optional[PollingConfig] = None,
        resolver: Optional[RevertReasonResolver] = None,
        revert_network: Union[Network, str] = DEFAULT_REVERT_NETWORK,
    ):
        self.provider = provider
        self.polling = polling or PollingConfig()
        self.resolver = resolver or RevertReasonResolver()
        self.revert_network = revert_network
        self._pending: Set[str] = set()

    @classmethod
    def from_network(
        cls,
        network: Union[Network, str],
        rpc_url: Optional[str] = None,
        timeout: int = PROVIDER_TIMEOUT_SECONDS,
        polling: Optional[PollingConfig] = None,
    ) -> "ChainClient":
        """Build a client on ``network`` whose failed receipts are replayed on the same network."""
        config = get_network_config(network, rpc_url)
        provider = Web3ChainProvider(config.rpc_url, timeout=timeout)
        return cls(
            provider,
            polling=polling,
            resolver=RevertReasonResolver(provider),
            revert_network=config.name,
        )

    @property
    def pending_transactions(self) -> FrozenSet[str]:
        """Hashes submitted by this client whose receipt has not been fetched."""
        return frozenset(self._pending)

    # ------------------------------------------------------------------
    # Calls and transactions
    # ------------------------------------------------------------------
    def encode_call(self, method: ContractMethod, *args: Any) -> str:
        """Encode calldata for ``method``.

        Without arguments only the 4-byte selector of ``method.signature``
        is returned and the ABI entry is not resolved.
        """
        return encode_method_call(method, args)

    async def call(self, method: ContractMethod, *args: Any) -> Optional[Dict[str, Any]]:
        """Invoke ``method`` read-only and decode its return value.

        Returns:
            Decoded outputs keyed by position and name, or None when the
            call returned no data

        Raises:
            NotFoundError: If ``method.name`` is not in its ABI
            SchemaError: If the ABI entry declares no outputs
            ProviderError: If the call fails
        """
        data = self.encode_call(method, *args)
        result = await self.provider.call({"to": method.address, "data": data}, LATEST_BLOCK)
        if not result or result == EMPTY_RESULT:
            return None
        return decode_outputs(method, result)

    async def send_transaction(self, from_address: str, method: ContractMethod, *args: Any) -> str:
        """Submit a state-changing call to ``method``.

        Gas is estimated by the provider. Returns as soon as the node
        reports the transaction hash; use ``wait_for_receipt`` for the
        outcome.

        Returns:
            Transaction hash (0x-prefixed hex)

        Raises:
            InvalidInputError: If ``from_address`` is malformed
            ProviderError: If estimation or submission fails
        """
        validate_address(from_address, "from_address")
        tx = {
            "from": from_address,
            "to": method.address,
            "data": self.encode_call(method, *args),
        }
        gas = await self.provider.estimate_gas(tx)
        tx_hash = await self.provider.send_transaction({**tx, "gas": gas})
        self._pending.add(tx_hash)
        _logger.info(
            "Transaction submitted",
            extra={"tx_hash": tx_hash, "method": method.name, "gas": gas},
        )
        return tx_hash

    # ------------------------------------------------------------------
    # Receipts
    # ------------------------------------------------------------------
    async def wait_for_receipt(
        self,
        tx_hash: str,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> TransactionReceipt:
        """Poll until ``tx_hash`` is mined and return its receipt.

        Failed transactions are replayed to attach ``revert_reason``.

        Args:
            tx_hash: Transaction hash
            cancel_event: Setting this event stops the poll

        Raises:
            ReceiptTimeoutError: If ``polling.max_attempts`` is exhausted
            PollCancelledError: If ``cancel_event`` is set
            DecodeFailure, ArchiveRequiredError: If the revert reason cannot be recovered
        """
        attempts = 0
        while True:
            if cancel_event is not None and cancel_event.is_set():
                raise PollCancelledError(tx_hash)

            raw = await self.provider.get_transaction_receipt(tx_hash)
            attempts += 1
            if raw:
                break

            if self.polling.max_attempts is not None and attempts >= self.polling.max_attempts:
                raise ReceiptTimeoutError(tx_hash, attempts)

            _logger.debug("Receipt not available yet", extra={"tx_hash": tx_hash, "attempt": attempts})
            await self._sleep(tx_hash, cancel_event)

        self._pending.discard(tx_hash)
        receipt = TransactionReceipt.from_raw(raw)
        if not receipt.failed:
            _logger.info("Transaction confirmed", extra={"tx_hash": tx_hash, "block": receipt.block_number})
            return receipt

        _logger.info("Transaction failed, resolving revert reason", extra={"tx_hash": tx_hash})
        reason = await self.get_revert_reason(receipt.transaction_hash or tx_hash, self.revert_network)
        return TransactionReceipt.from_raw(raw, revert_reason=reason)

    async def get_revert_reason(
        self,
        tx_hash: str,
        network: Union[Network, str] = Network.MAINNET,
        block_number: Optional[BlockNumber] = None,
    ) -> str:
        """Recover the revert reason of a failed transaction (see RevertReasonResolver)."""
        return await self.resolver.resolve(tx_hash, network, block_number)

    async def _sleep(self, tx_hash: str, cancel_event: Optional[asyncio.Event]) -> None:
        if cancel_event is None:
            await asyncio.sleep(self.polling.interval)
            return
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=self.polling.interval)
        except asyncio.TimeoutError:
            return
        raise PollCancelledError(tx_hash)
