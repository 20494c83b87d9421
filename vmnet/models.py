"""Data structures exchanged between the engine and its caller.

Desired interfaces come in from the VM lifecycle controller; normalized
results go back out and are used to build the VM's NIC configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vmnet.clients import NetworkBacking


@dataclass(frozen=True)
class VMContext:
    """Identity of the VM whose interfaces are being reconciled."""
    name: str
    namespace: str
    uid: str = ""  # Used for owner references when known


@dataclass(frozen=True)
class ClusterRef:
    """Compute cluster scope for backing resolution."""
    value: str
    type: str = "ClusterComputeResource"


@dataclass(frozen=True)
class NetworkRef:
    """Logical network an interface attaches to.

    An empty name selects the namespace default network.
    """
    name: str = ""
    kind: str = ""


@dataclass(frozen=True)
class DesiredInterfaceSpec:
    """A VM network interface as requested by the caller."""
    name: str
    network: NetworkRef = field(default_factory=NetworkRef)
    # None means "DHCP4 unless a static IPv4 config is present"
    wants_dhcp4: bool | None = None
    wants_dhcp6: bool = False
    # Static configuration, CIDR notation (e.g. 10.0.0.5/24)
    addresses: tuple[str, ...] = ()
    gateway4: str = ""
    gateway6: str = ""
    nameservers: tuple[str, ...] = ()
    search_domains: tuple[str, ...] = ()
    mtu: int | None = None


@dataclass(frozen=True)
class IPConfig:
    """One normalized IP assignment of an interface."""
    ip_cidr: str
    is_ipv4: bool
    gateway: str = ""


@dataclass
class NetworkInterfaceResult:
    """Normalized view of a provisioned interface."""
    name: str
    network_name: str = ""
    mac_address: str = ""
    external_id: str = ""
    network_id: str = ""
    backing: NetworkBacking | None = None  # None until resolvable
    dhcp4: bool = False
    dhcp6: bool = False
    ip_configs: list[IPConfig] = field(default_factory=list)
    nameservers: list[str] = field(default_factory=list)
    search_domains: list[str] = field(default_factory=list)
    mtu: int | None = None


@dataclass
class NetworkInterfaceResults:
    """Results in the same order as the desired interface specs."""
    results: list[NetworkInterfaceResult] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self):
        return iter(self.results)

    def __getitem__(self, index: int) -> NetworkInterfaceResult:
        return self.results[index]
