"""Network backend abstraction for VM interface provisioning."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

from vmnet.clients import Inventory, NetworkBacking, ObjectStore
from vmnet.errors import InvalidAddressError, ObjectAlreadyExistsError, ObjectNotFoundError
from vmnet.models import ClusterRef, DesiredInterfaceSpec, IPConfig, NetworkInterfaceResult, VMContext
from vmnet.network.addressing import normalize_ip_config
from vmnet.network.naming import NameFunc, candidate_names
from vmnet.resources import (
    INTERFACE_NAME_LABEL,
    VM_NAME_LABEL,
    BackendResource,
    Condition,
    ObjectMeta,
    OwnerReference,
)

logger = logging.getLogger(__name__)

VM_API_VERSION = "vmoperator.vmware.com/v1alpha2"
VM_KIND = "VirtualMachine"


@dataclass
class BackendRequest:
    """A resolved provisioning request for one interface.

    For object-backed variants obj is the backend request object; for the
    named variant it is the inventory network itself.
    """
    interface_name: str
    namespace: str
    name: str
    obj: Any = None
    legacy: bool = False


class NetworkBackend(ABC):
    """Abstract network backend interface.

    One implementation per network environment. The reconciler resolves
    every interface first, then polls ready_condition() through refresh()
    and projects the ready object with extract_result().
    """

    name: ClassVar[str] = ""

    def __init__(self, store: ObjectStore | None, inventory: Inventory):
        self.store = store
        self.inventory = inventory

    @abstractmethod
    async def resolve(self, vm: VMContext, spec: DesiredInterfaceSpec) -> BackendRequest:
        """Look up or create the request for an interface.

        Must be idempotent: resolving the same interface twice returns the
        same object and never creates a second one.
        """

    @abstractmethod
    async def refresh(self, request: BackendRequest) -> BackendRequest:
        """Re-read the request's current state."""

    @abstractmethod
    def ready_condition(self, request: BackendRequest) -> Condition | None:
        """Return the Ready condition of the request, if reported."""

    @abstractmethod
    def extract_result(
        self,
        spec: DesiredInterfaceSpec,
        request: BackendRequest,
    ) -> tuple[NetworkInterfaceResult | None, bool]:
        """Project the request's status into a result.

        Returns (None, False) while the request is not ready.
        """

    @abstractmethod
    async def resolve_backing(
        self,
        result: NetworkInterfaceResult,
        cluster: ClusterRef | None,
    ) -> NetworkBacking | None:
        """Map the result's network to an inventory backing.

        None without an error means "not resolvable yet" and is not a
        failure.
        """


class ResourceBackend(NetworkBackend):
    """Backend whose requests are objects reconciled by an external operator."""

    resource_type: ClassVar[type[BackendResource]]
    name_func: NameFunc

    @abstractmethod
    def build_resource(
        self,
        vm: VMContext,
        spec: DesiredInterfaceSpec,
        metadata: ObjectMeta,
    ) -> BackendResource:
        """Build a new request object for an interface."""

    @abstractmethod
    def project_result(
        self,
        spec: DesiredInterfaceSpec,
        obj: BackendResource,
    ) -> NetworkInterfaceResult:
        """Project a ready object's status into a result."""

    def object_name(self, vm: VMContext, spec: DesiredInterfaceSpec, legacy: bool = False) -> str:
        return self.name_func(vm.name, spec.network.name, spec.name, legacy)

    async def resolve(self, vm: VMContext, spec: DesiredInterfaceSpec) -> BackendRequest:
        kind = self.resource_type.KIND
        current = self.object_name(vm, spec)

        for candidate in candidate_names(self.name_func, vm.name, spec.network.name, spec.name):
            try:
                obj = await self.store.get(self.resource_type, vm.namespace, candidate)
            except ObjectNotFoundError:
                continue
            legacy = candidate != current
            logger.debug(
                f"Using existing {kind} {vm.namespace}/{candidate} for {spec.name}"
                + (" (legacy name)" if legacy else "")
            )
            return BackendRequest(spec.name, vm.namespace, candidate, obj, legacy)

        obj = self.build_resource(vm, spec, self._object_meta(vm, spec, current))
        try:
            obj = await self.store.create(obj)
            logger.info(f"Created {kind} {vm.namespace}/{current} for {vm.name}/{spec.name}")
        except ObjectAlreadyExistsError:
            # Created concurrently by another caller.
            obj = await self.store.get(self.resource_type, vm.namespace, current)
        return BackendRequest(spec.name, vm.namespace, current, obj)

    async def refresh(self, request: BackendRequest) -> BackendRequest:
        request.obj = await self.store.get(self.resource_type, request.namespace, request.name)
        return request

    def ready_condition(self, request: BackendRequest) -> Condition | None:
        return request.obj.ready_condition()

    def extract_result(
        self,
        spec: DesiredInterfaceSpec,
        request: BackendRequest,
    ) -> tuple[NetworkInterfaceResult | None, bool]:
        if not request.obj.is_ready():
            return None, False
        return self.project_result(spec, request.obj), True

    def _object_meta(self, vm: VMContext, spec: DesiredInterfaceSpec, name: str) -> ObjectMeta:
        owner_references = []
        if vm.uid:
            owner_references.append(
                OwnerReference(api_version=VM_API_VERSION, kind=VM_KIND, name=vm.name, uid=vm.uid)
            )
        return ObjectMeta(
            name=name,
            namespace=vm.namespace,
            labels={VM_NAME_LABEL: vm.name, INTERFACE_NAME_LABEL: spec.name},
            owner_references=owner_references,
        )


def normalize_reported_ip(
    interface_name: str,
    ip: str,
    subnet_mask: str,
    gateway: str,
) -> IPConfig:
    """Normalize one backend-reported address, attributing errors to the interface."""
    try:
        return normalize_ip_config(ip, subnet_mask, gateway)
    except InvalidAddressError as e:
        raise InvalidAddressError(e.message, interface_name) from e
