"""NSX-T backend: interfaces provisioned by NCP.

Each interface gets a VirtualNetworkInterface object. NCP allocates the
logical port, MAC and addresses and reports the logical switch the port
lives on. The same logical switch shows up as a different portgroup on
every cluster, so the backing can only be resolved once the cluster the
VM is placed on is known.
"""

from __future__ import annotations

import logging

from vmnet.clients import NetworkBacking
from vmnet.errors import BackingResolutionError
from vmnet.models import ClusterRef, DesiredInterfaceSpec, NetworkInterfaceResult, VMContext
from vmnet.network.backends.base import ResourceBackend, normalize_reported_ip
from vmnet.network.naming import ncp_object_name
from vmnet.resources import ObjectMeta, VirtualNetworkInterface, VirtualNetworkInterfaceSpec

logger = logging.getLogger(__name__)


class NSXTNetworkBackend(ResourceBackend):
    """Overlay networking on NSX-T logical switches."""

    name = "nsx-t"
    resource_type = VirtualNetworkInterface
    name_func = staticmethod(ncp_object_name)

    def build_resource(
        self,
        vm: VMContext,
        spec: DesiredInterfaceSpec,
        metadata: ObjectMeta,
    ) -> VirtualNetworkInterface:
        return VirtualNetworkInterface(
            metadata=metadata,
            spec=VirtualNetworkInterfaceSpec(virtual_network=spec.network.name),
        )

    def project_result(
        self,
        spec: DesiredInterfaceSpec,
        obj: VirtualNetworkInterface,
    ) -> NetworkInterfaceResult:
        status = obj.status
        logical_switch_id = ""
        if status.provider_status is not None:
            logical_switch_id = status.provider_status.nsx_logical_switch_id

        return NetworkInterfaceResult(
            name=spec.name,
            network_name=obj.spec.virtual_network,
            mac_address=status.mac_address,
            external_id=status.interface_id,
            network_id=logical_switch_id,
            ip_configs=[
                normalize_reported_ip(spec.name, entry.ip, entry.subnet_mask, entry.gateway)
                for entry in status.ip_addresses
            ],
        )

    async def resolve_backing(
        self,
        result: NetworkInterfaceResult,
        cluster: ClusterRef | None,
    ) -> NetworkBacking | None:
        if cluster is None:
            logger.debug(f"No cluster yet for {result.name}, deferring backing resolution")
            return None
        if not result.network_id:
            raise BackingResolutionError("backend did not report a logical switch id", result.name)

        matches = [
            network
            for network in await self.inventory.list_cluster_networks(cluster)
            if network.logical_switch_uuid == result.network_id
        ]
        if not matches:
            raise BackingResolutionError(
                f"no portgroup for logical switch {result.network_id!r} on cluster {cluster.value}",
                result.name,
            )
        if len(matches) > 1:
            raise BackingResolutionError(
                f"found {len(matches)} portgroups for logical switch {result.network_id!r} "
                f"on cluster {cluster.value}",
                result.name,
            )
        return matches[0]
