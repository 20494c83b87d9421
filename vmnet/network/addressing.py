"""IP address normalization.

Backends report an address and a dotted subnet mask; the VM configuration
path wants CIDR notation plus the address family.
"""

from __future__ import annotations

import ipaddress

from vmnet.errors import InvalidAddressError
from vmnet.models import IPConfig


def mask_to_prefix_length(subnet_mask: str, version: int) -> int:
    """Convert a subnet mask literal to a prefix length.

    The mask must belong to the given address family and consist of a
    contiguous run of one bits.
    """
    try:
        mask = ipaddress.ip_address(subnet_mask.strip())
    except ValueError as e:
        raise InvalidAddressError(f"invalid subnet mask {subnet_mask!r}") from e
    if mask.version != version:
        raise InvalidAddressError(
            f"subnet mask {subnet_mask!r} is not an IPv{version} mask"
        )

    bits = 32 if version == 4 else 128
    value = int(mask)
    prefix_len = bits - (~value & ((1 << bits) - 1)).bit_length()
    if value != ((1 << bits) - 1) ^ ((1 << (bits - prefix_len)) - 1):
        raise InvalidAddressError(f"subnet mask {subnet_mask!r} is not contiguous")
    return prefix_len


def normalize_ip_config(ip: str, subnet_mask: str, gateway: str = "") -> IPConfig:
    """Build an IPConfig from a backend-reported address and mask.

    Examples:
        192.168.1.110 + 255.255.255.0 -> 192.168.1.110/24
        fd1a:6c85:79fe:7c98::f + ffff:ffff:ffff:ff00:: -> fd1a:6c85:79fe:7c98::f/56
    """
    try:
        address = ipaddress.ip_address(ip.strip())
    except ValueError as e:
        raise InvalidAddressError(f"invalid IP address {ip!r}") from e

    prefix_len = mask_to_prefix_length(subnet_mask, address.version)
    return IPConfig(
        ip_cidr=f"{address.compressed}/{prefix_len}",
        is_ipv4=address.version == 4,
        gateway=gateway,
    )


def parse_cidr(cidr: str, gateway4: str = "", gateway6: str = "") -> IPConfig:
    """Build an IPConfig from a caller-supplied static address in CIDR form.

    Host bits are kept, so 10.0.0.5/24 stays 10.0.0.5/24. The gateway of
    the matching family is attached.
    """
    try:
        interface = ipaddress.ip_interface(cidr.strip())
    except ValueError as e:
        raise InvalidAddressError(f"invalid CIDR {cidr!r}") from e
    if "/" not in cidr:
        raise InvalidAddressError(f"CIDR {cidr!r} has no prefix length")

    is_ipv4 = interface.version == 4
    return IPConfig(
        ip_cidr=f"{interface.ip.compressed}/{interface.network.prefixlen}",
        is_ipv4=is_ipv4,
        gateway=gateway4 if is_ipv4 else gateway6,
    )
