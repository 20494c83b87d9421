"""Network backend registry and selector."""

from __future__ import annotations

import logging

from vmnet.clients import Inventory, ObjectStore
from vmnet.config import NetworkEnvironment, settings
from vmnet.network.backends.base import NetworkBackend
from vmnet.network.backends.named import NamedNetworkBackend
from vmnet.network.backends.nsxt import NSXTNetworkBackend
from vmnet.network.backends.vds import VDSNetworkBackend
from vmnet.registry import LazySingleton

logger = logging.getLogger(__name__)

BACKENDS: dict[NetworkEnvironment, type[NetworkBackend]] = {
    NetworkEnvironment.NAMED: NamedNetworkBackend,
    NetworkEnvironment.VDS: VDSNetworkBackend,
    NetworkEnvironment.NSXT: NSXTNetworkBackend,
}


def build_network_backend(
    environment: NetworkEnvironment | str,
    store: ObjectStore | None,
    inventory: Inventory,
) -> NetworkBackend:
    """Build the backend for a network environment."""
    try:
        backend_cls = BACKENDS[NetworkEnvironment(environment)]
    except ValueError:
        raise ValueError(f"Unsupported network environment '{environment}'") from None

    if backend_cls is not NamedNetworkBackend and store is None:
        raise ValueError(f"Network environment '{environment}' requires an object store")
    return backend_cls(store, inventory)


# Collaborators registered during process startup
_collaborators: dict[str, object] = {}


def _build_backend() -> NetworkBackend:
    if "inventory" not in _collaborators:
        raise RuntimeError("configure_network_backend() must be called before get_network_backend()")
    environment = settings.network_provider_type
    logger.info(f"Using '{NetworkEnvironment(environment).value}' network backend")
    return build_network_backend(
        environment,
        _collaborators.get("store"),
        _collaborators["inventory"],
    )


_backend_singleton = LazySingleton(_build_backend)


def configure_network_backend(store: ObjectStore | None, inventory: Inventory) -> None:
    """Register the collaborators the process-wide backend is built from."""
    if _backend_singleton.is_built:
        logger.info("Reconfiguring network backend; the current instance is discarded")
    _collaborators["store"] = store
    _collaborators["inventory"] = inventory
    _backend_singleton.reset()


def get_network_backend() -> NetworkBackend:
    """Return the configured network backend singleton."""
    return _backend_singleton.get()


def reset_network_backend() -> None:
    """Reset the backend singleton and its collaborators (mainly for testing)."""
    _collaborators.clear()
    _backend_singleton.reset()
