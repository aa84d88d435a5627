"""Method registry.

Maps human-readable method names to the address, call signature and
ABI fragment needed to invoke them.
"""
import json
from pathlib import Path
from typing import Dict, Iterable, List

from .abi import function_signature
from .errors import NotFoundError
from .models import AbiEntry, ContractMethod

__all__ = ["ABI_DIR", "find_in_abi", "load_abi", "MethodRegistry"]

# ABI file directory
ABI_DIR = Path(__file__).parent / "abis"

# ABI loading cache
_ABI_CACHE: Dict[str, List[AbiEntry]] = {}


def load_abi(name: str) -> List[AbiEntry]:
    """Load a bundled ABI JSON with caching.

    Args:
        name: ABI filename (e.g., "simple.json")

    Returns:
        Parsed ABI list
    """
    if name not in _ABI_CACHE:
        _ABI_CACHE[name] = json.loads((ABI_DIR / name).read_text())
    return _ABI_CACHE[name]


def find_in_abi(name: str, abi: Iterable[AbiEntry]) -> AbiEntry:
    """Return the first ABI entry called ``name``.

    Raises:
        NotFoundError: If no entry matches
    """
    for entry in abi:
        if entry.get("name") == name:
            return entry
    raise NotFoundError(name)


class MethodRegistry:
    """Lookup table of ContractMethod descriptions keyed by name."""

    def __init__(self, methods: Iterable[ContractMethod] = ()) -> None:
        self._methods: Dict[str, ContractMethod] = {}
        for method in methods:
            self.register(method)

    @classmethod
    def from_abi(cls, address: str, abi: List[AbiEntry]) -> "MethodRegistry":
        """Build a registry holding every function of ``abi`` at ``address``."""
        return cls(
            ContractMethod(
                name=entry["name"],
                signature=function_signature(entry),
                address=address,
                abi=abi,
                method=entry,
            )
            for entry in abi
            if entry.get("type", "function") == "function" and entry.get("name")
        )

    def register(self, method: ContractMethod) -> None:
        self._methods[method.name] = method

    def get(self, name: str) -> ContractMethod:
        try:
            return self._methods[name]
        except KeyError:
            raise NotFoundError(name) from None

    def names(self) -> List[str]:
        return list(self._methods)

    def __contains__(self, name: object) -> bool:
        return name in self._methods

    def __len__(self) -> int:
        return len(self._methods)
