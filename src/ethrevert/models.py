from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

__all__ = ["AbiEntry", "ContractMethod", "TransactionReceipt"]

AbiEntry = Dict[str, Any]


@dataclass
class ContractMethod:
    """Description of a single contract method.

    The ABI entry matching ``name`` is looked up lazily on first use of
    ``abi_entry`` and cached in ``method``.

    Attributes:
        name: Method name as it appears in the ABI
        signature: Canonical function signature, e.g. ``testNumber(uint256)``
        address: Contract address the method lives on
        abi: ABI fragment containing the method
        method: Resolved ABI entry, if already known
    """
    name: str
    signature: str
    address: str
    abi: List[AbiEntry]
    method: Optional[AbiEntry] = None

    @property
    def abi_entry(self) -> AbiEntry:
        if self.method is None:
            from .registry import find_in_abi

            self.method = find_in_abi(self.name, self.abi)
        return self.method


def _to_hex(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    return str(value)


def _to_status(value: Any) -> Optional[bool]:
    # Receipts mined before Byzantium carry no status field
    if value is None:
        return None
    if isinstance(value, str):
        value = int(value, 16) if value.lower().startswith("0x") else int(value)
    return int(value) != 0


@dataclass(frozen=True)
class TransactionReceipt:
    """Transaction receipt extended with the decoded revert reason.

    Attributes:
        transaction_hash: Hash of the mined transaction
        status: True when the transaction succeeded, None when the
            receipt has no status field
        block_number: Block the transaction was mined in
        block_hash: Hash of that block
        gas_used: Gas consumed by the transaction
        logs: Raw log entries
        raw: Full receipt mapping as returned by the provider
        revert_reason: Decoded revert reason (failed transactions only)
    """
    transaction_hash: str
    status: Optional[bool]
    block_number: Optional[int] = None
    block_hash: Optional[str] = None
    gas_used: Optional[int] = None
    logs: List[Any] = field(default_factory=list)
    raw: Mapping[str, Any] = field(default_factory=dict)
    revert_reason: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status is False

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any], revert_reason: Optional[str] = None) -> "TransactionReceipt":
        return cls(
            transaction_hash=_to_hex(raw.get("transactionHash")) or "",
            status=_to_status(raw.get("status")),
            block_number=raw.get("blockNumber"),
            block_hash=_to_hex(raw.get("blockHash")),
            gas_used=raw.get("gasUsed"),
            logs=list(raw.get("logs") or []),
            raw=dict(raw),
            revert_reason=revert_reason,
        )
