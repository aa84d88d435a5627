"""
Exception hierarchy for ethrevert.

All exceptions inherit from EthRevertError, which carries a
machine-readable code, an optional transaction hash and a details
mapping alongside the human-readable message.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

__all__ = [
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


def _short_hash(tx_hash: str) -> str:
    if len(tx_hash) <= 16:
        return tx_hash
    return f"{tx_hash[:10]}...{tx_hash[-4:]}"


class EthRevertError(Exception):
    """
    Base exception for all ethrevert errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code (e.g., "DECODE_FAILURE").
        tx_hash: Transaction being resolved or polled, if any.
        details: Extra context; ``network`` and ``block_number`` are
            shown in ``str()`` when present.

    Example:
        >>> err = EthRevertError(
        ...     "Replay failed",
        ...     code="REPLAY_FAILED",
        ...     tx_hash="0x6ea1...",
        ...     details={"network": "kovan", "block_number": 1200},
        ... )
        >>> str(err)
        'REPLAY_FAILED: Replay failed (tx=0x6ea1..., network=kovan, block=1200)'
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "ETHREVERT_ERROR",
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.tx_hash = tx_hash
        self.details = details or {}

    def _context(self) -> List[str]:
        context = []
        if self.tx_hash:
            context.append(f"tx={_short_hash(self.tx_hash)}")
        if "network" in self.details:
            context.append(f"network={self.details['network']}")
        if "block_number" in self.details:
            context.append(f"block={self.details['block_number']}")
        return context

    def __str__(self) -> str:
        text = f"{self.code}: {self.message}"
        context = self._context()
        return f"{text} ({', '.join(context)})" if context else text

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, tx_hash={self.tx_hash!r}, details={self.details!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Flatten the error for structured logs and JSON responses."""
        data: Dict[str, Any] = {"type": self.__class__.__name__, "code": self.code, "message": self.message}
        if self.tx_hash:
            data["tx_hash"] = self.tx_hash
        if self.details:
            data["details"] = dict(self.details)
        return data


class NotFoundError(EthRevertError):
    """Raised when a method name is absent from an ABI."""

    def __init__(self, name: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        details = details or {}
        details["name"] = name
        super().__init__(f"No ABI entry found for '{name}'", code="ABI_ENTRY_NOT_FOUND", details=details)
        self.name = name


class SchemaError(EthRevertError):
    """Raised when an ABI entry cannot describe the data being decoded."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="ABI_SCHEMA_ERROR", details=details)


class InvalidInputError(EthRevertError):
    """
    Raised when a transaction hash, network, block number or address is malformed.

    Example:
        >>> raise InvalidInputError("Invalid transaction hash", field="tx_hash", value="0x12")
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Any = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, code="INVALID_INPUT", details=details)
        self.field = field


class UnsupportedProviderError(EthRevertError):
    """Raised when a Kovan provider does not expose the Parity call-data endpoints."""

    def __init__(self, *, tx_hash: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(
            "Please use a provider that exposes the Parity trace methods to decode the revert reason.",
            code="UNSUPPORTED_PROVIDER",
            tx_hash=tx_hash,
            details=details,
        )


class FutureBlockError(EthRevertError):
    """Raised when the requested block has not been mined yet."""

    def __init__(self, block_number: int, current_block: int, *, tx_hash: Optional[str] = None) -> None:
        super().__init__(
            "You cannot use a blocknumber that has not yet happened.",
            code="FUTURE_BLOCK",
            tx_hash=tx_hash,
            details={"block_number": block_number, "current_block": current_block},
        )
        self.block_number = block_number
        self.current_block = current_block


class ArchiveRequiredError(EthRevertError):
    """
    Raised when the requested block is outside the pruning window of a
    non-archive node.

    Callers showing revert reasons to users should treat this as an
    explainable failure alongside DecodeFailure.
    """

    def __init__(self, block_number: int, *, tx_hash: Optional[str] = None) -> None:
        super().__init__(
            "You cannot use a blocknumber that is older than 128 blocks. "
            "Please use a provider that uses a full archival node.",
            code="ARCHIVE_REQUIRED",
            tx_hash=tx_hash,
            details={"block_number": block_number},
        )
        self.block_number = block_number


class DecodeFailure(EthRevertError):
    """Raised when replaying or decoding a revert payload fails."""

    def __init__(self, *, tx_hash: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__("Unable to decode revert reason.", code="DECODE_FAILURE", tx_hash=tx_hash, details=details)


class ProviderError(EthRevertError):
    """
    Raised when a chain-state provider request fails.

    Attributes:
        rpc_code: JSON-RPC error code, when the node returned one.
        data: JSON-RPC error ``data`` member, when present.
    """

    def __init__(
        self,
        message: str,
        *,
        rpc_code: Optional[int] = None,
        data: Any = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if rpc_code is not None:
            details["rpc_code"] = rpc_code
        super().__init__(message, code="PROVIDER_ERROR", details=details)
        self.rpc_code = rpc_code
        self.data = data


class ReceiptTimeoutError(EthRevertError):
    """Raised when a receipt is still missing after the configured attempts."""

    def __init__(self, tx_hash: str, attempts: int) -> None:
        super().__init__(
            f"Receipt not available after {attempts} attempts",
            code="RECEIPT_TIMEOUT",
            tx_hash=tx_hash,
            details={"attempts": attempts},
        )
        self.attempts = attempts


class PollCancelledError(EthRevertError):
    """Raised when a receipt poll is cancelled by the caller."""

    def __init__(self, tx_hash: str) -> None:
        super().__init__("Receipt polling cancelled", code="POLL_CANCELLED", tx_hash=tx_hash)
