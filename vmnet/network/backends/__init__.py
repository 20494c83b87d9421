"""Network backend implementations and registry."""

from vmnet.network.backends.base import BackendRequest, NetworkBackend
from vmnet.network.backends.named import NamedNetworkBackend
from vmnet.network.backends.nsxt import NSXTNetworkBackend
from vmnet.network.backends.registry import (
    build_network_backend,
    configure_network_backend,
    get_network_backend,
    reset_network_backend,
)
from vmnet.network.backends.vds import VDSNetworkBackend

__all__ = [
    "BackendRequest",
    "NetworkBackend",
    "NamedNetworkBackend",
    "NSXTNetworkBackend",
    "VDSNetworkBackend",
    "build_network_backend",
    "configure_network_backend",
    "get_network_backend",
    "reset_network_backend",
]
