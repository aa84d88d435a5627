"""ABI codec helpers built on eth-abi and eth-utils."""
from typing import Any, Dict, List, Sequence

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector, to_bytes

from .errors import SchemaError
from .models import AbiEntry, ContractMethod

__all__ = [
    "collapse_type",
    "function_signature",
    "encode_selector",
    "encode_function_call",
    "encode_method_call",
    "decode_outputs",
]


def collapse_type(param: Dict[str, Any]) -> str:
    """Canonical type string for an ABI parameter (tuples expanded)."""
    abi_type = param["type"]
    if not abi_type.startswith("tuple"):
        return abi_type
    inner = ",".join(collapse_type(c) for c in param.get("components", []))
    return f"({inner}){abi_type[len('tuple'):]}"


def function_signature(entry: AbiEntry) -> str:
    """Canonical signature, e.g. ``testNumber(uint256)``."""
    types = ",".join(collapse_type(p) for p in entry.get("inputs", []))
    return f"{entry['name']}({types})"


def encode_selector(signature: str) -> str:
    return "0x" + function_signature_to_4byte_selector(signature).hex()


def encode_function_call(entry: AbiEntry, args: Sequence[Any]) -> str:
    """Encode selector + parameters for ``entry`` called with ``args``."""
    inputs = entry.get("inputs", [])
    if len(inputs) != len(args):
        raise SchemaError(
            f"{entry.get('name')} expects {len(inputs)} arguments, got {len(args)}",
            details={"expected": len(inputs), "received": len(args)},
        )
    types = [collapse_type(p) for p in inputs]
    selector = function_signature_to_4byte_selector(function_signature(entry))
    return "0x" + (selector + encode(types, list(args))).hex()


def encode_method_call(method: ContractMethod, args: Sequence[Any]) -> str:
    """Encode a call to ``method``.

    Without arguments only the selector of ``method.signature`` is
    produced and the ABI entry is never resolved.
    """
    if not args:
        return encode_selector(method.signature)
    return encode_function_call(method.abi_entry, args)


def decode_outputs(method: ContractMethod, output: str) -> Dict[str, Any]:
    """Decode raw call output using the outputs declared for ``method``.

    The result is keyed by position ("0", "1", ...) and, for named
    outputs, by name as well.

    Raises:
        SchemaError: If the ABI entry declares no outputs
    """
    outputs: List[Dict[str, Any]] = method.abi_entry.get("outputs") or []
    if not outputs:
        raise SchemaError("No outputs in ABI", details={"method": method.name})

    values = decode([collapse_type(o) for o in outputs], to_bytes(hexstr=output))
    decoded: Dict[str, Any] = {}
    for index, (param, value) in enumerate(zip(outputs, values)):
        decoded[str(index)] = value
        if param.get("name"):
            decoded[param["name"]] = value
    return decoded
