"""Interfaces of the external collaborators the engine talks to.

The object store holds backend request objects (custom resources watched
by the network backends' own reconcilers). The inventory resolves network
identifiers to the concrete objects a virtual NIC can attach to.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from vmnet.models import ClusterRef
    from vmnet.resources import BackendResource

R = TypeVar("R", bound="BackendResource")


@dataclass(frozen=True)
class ManagedObjectRef:
    """Reference to an inventory object (e.g. a distributed portgroup)."""
    type: str
    value: str


@dataclass(frozen=True)
class NetworkBacking:
    """Inventory network a virtual NIC can be backed by."""
    ref: ManagedObjectRef
    name: str = ""
    backing_type: str = "standard"  # "standard", "dvs" or "nsx"
    logical_switch_uuid: str = ""

    def reference(self) -> ManagedObjectRef:
        return self.ref


class ObjectStore(ABC):
    """Namespaced object store for backend request objects.

    The engine only creates objects and reads them back. Status is owned
    by the backend reconciler and is never written here.
    """

    @abstractmethod
    async def get(self, resource_type: type[R], namespace: str, name: str) -> R:
        """Return the object, or raise ObjectNotFoundError."""

    @abstractmethod
    async def create(self, obj: R) -> R:
        """Create the object, or raise ObjectAlreadyExistsError."""


class Inventory(ABC):
    """Virtualization inventory lookups."""

    @abstractmethod
    async def find_network(self, name: str) -> NetworkBacking | None:
        """Find a network by its inventory name."""

    @abstractmethod
    async def get_network_by_id(self, network_id: str) -> NetworkBacking | None:
        """Find a network by its managed object id (portgroup key)."""

    @abstractmethod
    async def list_cluster_networks(self, cluster: ClusterRef) -> list[NetworkBacking]:
        """List the networks visible to a compute cluster."""
