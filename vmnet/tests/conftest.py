from __future__ import annotations

from typing import TypeVar

import pytest

from vmnet.clients import Inventory, ManagedObjectRef, NetworkBacking, ObjectStore
from vmnet.config import settings
from vmnet.errors import ObjectAlreadyExistsError, ObjectNotFoundError
from vmnet.models import ClusterRef, VMContext
from vmnet.network.backends.registry import reset_network_backend
from vmnet.resources import BackendResource, Condition, ConditionStatus

R = TypeVar("R", bound=BackendResource)

NSXT_LOGICAL_SWITCH_UUID = "nsxt-dummy-ls-uuid"
DVPG_NAME = "DC0_DVPG0"
DVPG_REF = ManagedObjectRef(type="DistributedVirtualPortgroup", value="dvportgroup-11")
CLUSTER = ClusterRef(value="domain-c7")


class FakeObjectStore(ObjectStore):
    """In-memory object store keyed by (kind, namespace, name).

    Objects are copied on the way in and out, like a real API server.
    """

    def __init__(self):
        self.objects: dict[tuple[str, str, str], BackendResource] = {}
        self.create_calls = 0
        self.get_calls = 0

    @staticmethod
    def _key(kind: str, namespace: str, name: str) -> tuple[str, str, str]:
        return (kind, namespace, name)

    async def get(self, resource_type: type[R], namespace: str, name: str) -> R:
        self.get_calls += 1
        key = self._key(resource_type.KIND, namespace, name)
        if key not in self.objects:
            raise ObjectNotFoundError(resource_type.KIND, namespace, name)
        return self.objects[key].model_copy(deep=True)

    async def create(self, obj: R) -> R:
        self.create_calls += 1
        key = self._key(obj.KIND, obj.metadata.namespace, obj.metadata.name)
        if key in self.objects:
            raise ObjectAlreadyExistsError(obj.KIND, obj.metadata.namespace, obj.metadata.name)
        self.objects[key] = obj.model_copy(deep=True)
        return obj.model_copy(deep=True)

    # --- Helpers standing in for the backend reconcilers ---

    def add(self, obj: BackendResource) -> None:
        self.objects[self._key(obj.KIND, obj.metadata.namespace, obj.metadata.name)] = obj

    def lookup(self, resource_type: type[R], namespace: str, name: str) -> R | None:
        return self.objects.get(self._key(resource_type.KIND, namespace, name))

    def objects_of(self, resource_type: type[R]) -> list[R]:
        return [obj for (kind, _, _), obj in self.objects.items() if kind == resource_type.KIND]


class FakeInventory(Inventory):
    """Inventory with a single distributed portgroup shared by one cluster."""

    def __init__(self, networks: list[NetworkBacking] | None = None):
        self.networks = networks or []
        self.cluster_networks: dict[str, list[NetworkBacking]] = {}

    async def find_network(self, name: str) -> NetworkBacking | None:
        for network in self.networks:
            if network.name == name:
                return network
        return None

    async def get_network_by_id(self, network_id: str) -> NetworkBacking | None:
        for network in self.networks:
            if network.ref.value == network_id:
                return network
        return None

    async def list_cluster_networks(self, cluster: ClusterRef) -> list[NetworkBacking]:
        return list(self.cluster_networks.get(cluster.value, []))


def mark_ready(obj: BackendResource, status: ConditionStatus = ConditionStatus.TRUE, reason: str = "") -> None:
    obj.status.conditions = [Condition(type="Ready", status=status, reason=reason)]


@pytest.fixture(autouse=True)
def _reset_engine_state(monkeypatch):
    """Keep process-wide tunables and the backend singleton test-local."""
    monkeypatch.setattr(settings, "retry_timeout", 1.0)
    monkeypatch.setattr(settings, "poll_interval", 0.05)
    reset_network_backend()
    yield
    reset_network_backend()


@pytest.fixture
def vm() -> VMContext:
    return VMContext(name="network-test-vm", namespace="network-test-ns", uid="vm-uid-1234")


@pytest.fixture
def store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def dvpg() -> NetworkBacking:
    return NetworkBacking(ref=DVPG_REF, name=DVPG_NAME, backing_type="dvs")


@pytest.fixture
def nsx_dvpg() -> NetworkBacking:
    return NetworkBacking(
        ref=DVPG_REF,
        name=DVPG_NAME,
        backing_type="nsx",
        logical_switch_uuid=NSXT_LOGICAL_SWITCH_UUID,
    )


@pytest.fixture
def inventory(dvpg) -> FakeInventory:
    inv = FakeInventory([dvpg])
    inv.cluster_networks[CLUSTER.value] = [dvpg]
    return inv


@pytest.fixture
def nsx_inventory(nsx_dvpg) -> FakeInventory:
    inv = FakeInventory([nsx_dvpg])
    inv.cluster_networks[CLUSTER.value] = [
        NetworkBacking(ref=ManagedObjectRef("Network", "network-7"), name="VM Network"),
        nsx_dvpg,
    ]
    return inv
