"""Backend request object shapes.

Only the fields the engine writes (metadata and spec on creation) or reads
(status) are modelled. Field aliases follow the camelCase wire names used
by the backend reconcilers.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Labels stamped on every object the engine creates
VM_NAME_LABEL = "vmnet.io/vm-name"
INTERFACE_NAME_LABEL = "vmnet.io/interface-name"

READY_CONDITION = "Ready"


class _Schema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ConditionStatus(str, Enum):
    """Tri-state condition value."""
    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class Condition(_Schema):
    """Observation reported by a backend reconciler."""
    type: str
    status: ConditionStatus = ConditionStatus.UNKNOWN
    reason: str = ""
    message: str = ""
    last_transition_time: datetime | None = None


class OwnerReference(_Schema):
    api_version: str
    kind: str
    name: str
    uid: str
    controller: bool = True


class ObjectMeta(_Schema):
    name: str
    namespace: str
    labels: dict[str, str] = Field(default_factory=dict)
    owner_references: list[OwnerReference] = Field(default_factory=list)


class BackendResource(_Schema):
    """Common shape of a backend request object."""

    API_VERSION: ClassVar[str] = ""
    KIND: ClassVar[str] = ""

    metadata: ObjectMeta

    def conditions(self) -> list[Condition]:
        status = getattr(self, "status", None)
        return list(status.conditions) if status is not None else []

    def ready_condition(self) -> Condition | None:
        for condition in self.conditions():
            if condition.type == READY_CONDITION:
                return condition
        return None

    def is_ready(self) -> bool:
        condition = self.ready_condition()
        return condition is not None and condition.status == ConditionStatus.TRUE


# --- VDS (net-operator) ---

class IPFamily(str, Enum):
    IPV4 = "IPv4"
    IPV6 = "IPv6"


class NetOPIPConfig(_Schema):
    ip: str
    ip_family: IPFamily = IPFamily.IPV4
    gateway: str = ""
    subnet_mask: str = ""


class NetworkInterfaceSpec(_Schema):
    network_name: str = ""
    type: str = "vmxnet3"


class NetworkInterfaceStatus(_Schema):
    network_id: str = Field("", alias="networkID")
    mac_address: str = ""
    external_id: str = Field("", alias="externalID")
    ip_configs: list[NetOPIPConfig] = Field(default_factory=list)
    conditions: list[Condition] = Field(default_factory=list)


class NetworkInterface(BackendResource):
    """net-operator interface request (VDS environments)."""

    API_VERSION: ClassVar[str] = "netoperator.vmware.com/v1alpha1"
    KIND: ClassVar[str] = "NetworkInterface"

    spec: NetworkInterfaceSpec = Field(default_factory=NetworkInterfaceSpec)
    status: NetworkInterfaceStatus = Field(default_factory=NetworkInterfaceStatus)


# --- NSX-T (NCP) ---

class VirtualNetworkInterfaceIP(_Schema):
    ip: str
    gateway: str = ""
    subnet_mask: str = ""


class VirtualNetworkInterfaceProviderStatus(_Schema):
    nsx_logical_switch_id: str = Field("", alias="nsxLogicalSwitchID")


class VirtualNetworkInterfaceSpec(_Schema):
    virtual_network: str = ""  # Empty selects the namespace default network


class VirtualNetworkInterfaceStatus(_Schema):
    interface_id: str = Field("", alias="interfaceID")
    mac_address: str = ""
    provider_status: VirtualNetworkInterfaceProviderStatus | None = None
    ip_addresses: list[VirtualNetworkInterfaceIP] = Field(default_factory=list)
    conditions: list[Condition] = Field(default_factory=list)


class VirtualNetworkInterface(BackendResource):
    """NCP logical port request (NSX-T environments)."""

    API_VERSION: ClassVar[str] = "vmware.com/v1alpha1"
    KIND: ClassVar[str] = "VirtualNetworkInterface"

    spec: VirtualNetworkInterfaceSpec = Field(default_factory=VirtualNetworkInterfaceSpec)
    status: VirtualNetworkInterfaceStatus = Field(default_factory=VirtualNetworkInterfaceStatus)
