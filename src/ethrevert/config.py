from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union

from .constants import DEFAULT_POLL_INTERVAL_SECONDS

__all__ = [
    "Network",
    "NetworkConfig",
    "NETWORKS",
    "get_network_config",
    "PollingConfig",
]

# Shared community project id for public read-only access
_INFURA_PROJECT_ID = "84842078b09946638c03157f83405213"


class Network(str, Enum):
    MAINNET = "mainnet"
    KOVAN = "kovan"
    GOERLI = "goerli"
    ROPSTEN = "ropsten"
    RINKEBY = "rinkeby"


@dataclass(frozen=True)
class NetworkConfig:
    name: Network
    chain_id: int
    rpc_url: str
    parity_error_data: bool = False


def _infura(network: Network) -> str:
    return f"https://{network.value}.infura.io/v3/{_INFURA_PROJECT_ID}"


NETWORKS: dict[Network, NetworkConfig] = {
    Network.MAINNET: NetworkConfig(name=Network.MAINNET, chain_id=1, rpc_url=_infura(Network.MAINNET)),
    Network.ROPSTEN: NetworkConfig(name=Network.ROPSTEN, chain_id=3, rpc_url=_infura(Network.ROPSTEN)),
    Network.RINKEBY: NetworkConfig(name=Network.RINKEBY, chain_id=4, rpc_url=_infura(Network.RINKEBY)),
    Network.GOERLI: NetworkConfig(name=Network.GOERLI, chain_id=5, rpc_url=_infura(Network.GOERLI)),
    # Kovan ran OpenEthereum (Parity): revert data comes back inside the RPC error
    Network.KOVAN: NetworkConfig(
        name=Network.KOVAN,
        chain_id=42,
        rpc_url=_infura(Network.KOVAN),
        parity_error_data=True,
    ),
}


def get_network_config(network: Union[Network, str], rpc_url: Optional[str] = None) -> NetworkConfig:
    cfg = NETWORKS[Network(network)]
    if rpc_url:
        return replace(cfg, rpc_url=rpc_url)
    return cfg


@dataclass
class PollingConfig:
    """
    Configuration for receipt polling.

    Example:
        ```python
        config = PollingConfig(interval=2.0, max_attempts=90)
        ```
    """

    interval: float = DEFAULT_POLL_INTERVAL_SECONDS
    """Seconds to wait between receipt queries."""

    max_attempts: Optional[int] = None
    """Maximum number of receipt queries (None polls until mined)."""
