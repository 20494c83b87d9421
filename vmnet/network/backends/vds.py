"""VDS backend: interfaces provisioned by net-operator.

Each interface gets a NetworkInterface object. net-operator assigns the
addresses, reports the distributed portgroup it picked as the network id
and flips the Ready condition.
"""

from __future__ import annotations

import logging

from vmnet.clients import NetworkBacking
from vmnet.config import settings
from vmnet.errors import BackingResolutionError, InvalidAddressError
from vmnet.models import ClusterRef, DesiredInterfaceSpec, NetworkInterfaceResult, VMContext
from vmnet.network.backends.base import ResourceBackend, normalize_reported_ip
from vmnet.network.naming import netop_object_name
from vmnet.resources import IPFamily, NetworkInterface, NetworkInterfaceSpec, ObjectMeta

logger = logging.getLogger(__name__)


class VDSNetworkBackend(ResourceBackend):
    """Software-defined networking on vSphere Distributed Switches."""

    name = "vds"
    resource_type = NetworkInterface
    name_func = staticmethod(netop_object_name)

    def build_resource(
        self,
        vm: VMContext,
        spec: DesiredInterfaceSpec,
        metadata: ObjectMeta,
    ) -> NetworkInterface:
        return NetworkInterface(
            metadata=metadata,
            spec=NetworkInterfaceSpec(
                network_name=spec.network.name,
                type=settings.interface_type,
            ),
        )

    def project_result(self, spec: DesiredInterfaceSpec, obj: NetworkInterface) -> NetworkInterfaceResult:
        status = obj.status
        ip_configs = []
        for entry in status.ip_configs:
            ip_config = normalize_reported_ip(spec.name, entry.ip, entry.subnet_mask, entry.gateway)
            if ip_config.is_ipv4 != (entry.ip_family == IPFamily.IPV4):
                raise InvalidAddressError(
                    f"address {entry.ip!r} does not match reported family {entry.ip_family.value}",
                    spec.name,
                )
            ip_configs.append(ip_config)

        return NetworkInterfaceResult(
            name=spec.name,
            network_name=obj.spec.network_name,
            mac_address=status.mac_address,  # net-operator leaves this empty
            external_id=status.external_id,
            network_id=status.network_id,
            ip_configs=ip_configs,
        )

    async def resolve_backing(
        self,
        result: NetworkInterfaceResult,
        cluster: ClusterRef | None,
    ) -> NetworkBacking | None:
        if not result.network_id:
            raise BackingResolutionError("backend did not report a network id", result.name)
        backing = await self.inventory.get_network_by_id(result.network_id)
        if backing is None:
            raise BackingResolutionError(
                f"no portgroup found for network id {result.network_id!r}", result.name
            )
        return backing
