"""Named network backend.

The network already exists in the inventory; there is no request object
and no external reconciler, so an interface is ready as soon as its
network is found.
"""

from __future__ import annotations

import logging

from vmnet.clients import NetworkBacking
from vmnet.config import settings
from vmnet.errors import NetworkNotFoundError
from vmnet.models import ClusterRef, DesiredInterfaceSpec, NetworkInterfaceResult, VMContext
from vmnet.network.backends.base import BackendRequest, NetworkBackend
from vmnet.resources import READY_CONDITION, Condition, ConditionStatus

logger = logging.getLogger(__name__)


class NamedNetworkBackend(NetworkBackend):
    """Attach interfaces directly to an existing inventory network."""

    name = "named"

    def network_name(self, spec: DesiredInterfaceSpec) -> str:
        return spec.network.name or settings.default_network

    async def resolve(self, vm: VMContext, spec: DesiredInterfaceSpec) -> BackendRequest:
        network_name = self.network_name(spec)
        backing = await self.inventory.find_network(network_name) if network_name else None
        if backing is None:
            raise NetworkNotFoundError(network_name, spec.name)
        logger.debug(f"Found named network {network_name} for {vm.name}/{spec.name}")
        return BackendRequest(spec.name, vm.namespace, network_name, backing)

    async def refresh(self, request: BackendRequest) -> BackendRequest:
        return request

    def ready_condition(self, request: BackendRequest) -> Condition | None:
        return Condition(type=READY_CONDITION, status=ConditionStatus.TRUE, reason="NetworkExists")

    def extract_result(
        self,
        spec: DesiredInterfaceSpec,
        request: BackendRequest,
    ) -> tuple[NetworkInterfaceResult | None, bool]:
        backing: NetworkBacking = request.obj
        return NetworkInterfaceResult(
            name=spec.name,
            network_name=request.name,
            network_id=backing.ref.value,
        ), True

    async def resolve_backing(
        self,
        result: NetworkInterfaceResult,
        cluster: ClusterRef | None,
    ) -> NetworkBacking | None:
        backing = await self.inventory.find_network(result.network_name)
        if backing is None:
            raise NetworkNotFoundError(result.network_name, result.name)
        return backing
