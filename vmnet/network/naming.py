"""Naming conventions for backend request objects.

Two schema generations are in use. Objects created by an older release are
named after the network and the VM only; current objects are named after
the VM, network and interface. Lookups must try the legacy name first so
that objects from before an upgrade keep being used instead of orphaned.
"""

from __future__ import annotations

import hashlib
import re
from typing import Callable

from vmnet.config import settings

NameFunc = Callable[[str, str, str, bool], str]

_HASH_LEN = 8


def sanitize_name(value: str) -> str:
    """Sanitize a string for use as an object name.

    Lower-cases, replaces anything outside [a-z0-9.-] with a dash and trims
    leading/trailing separators.
    """
    return re.sub(r"[^a-z0-9.-]", "-", value.lower()).strip("-.")


def _join(*parts: str) -> str:
    return "-".join(p for p in parts if p)


def _object_name(*parts: str) -> str:
    """Join parts into a bounded DNS-1123 object name.

    Names that are already valid and short enough are used as-is. Otherwise
    the sanitized (and truncated) name is suffixed with a hash of the raw
    parts, so inputs that only differ in characters sanitizing rewrites
    (my_net vs my-net, Eth0 vs eth0) still get distinct objects.
    """
    raw = _join(*parts)
    safe = sanitize_name(raw)
    max_len = settings.max_object_name_length
    if safe == raw and len(safe) <= max_len:
        return safe

    digest = hashlib.sha1("/".join(parts).encode()).hexdigest()[:_HASH_LEN]
    prefix = safe[:max_len - _HASH_LEN - 1].rstrip("-.")
    return f"{prefix}-{digest}" if prefix else digest


def netop_object_name(vm_name: str, network_name: str, interface_name: str, legacy: bool) -> str:
    """Name of a net-operator NetworkInterface (VDS).

    Format: legacy {network}-{vm}, current {vm}-{network}-{interface}
    """
    if legacy:
        return _object_name(network_name, vm_name)
    return _object_name(vm_name, network_name, interface_name)


def ncp_object_name(vm_name: str, network_name: str, interface_name: str, legacy: bool) -> str:
    """Name of an NCP VirtualNetworkInterface (NSX-T).

    Format: legacy {network}-{vm}-lsp, current {vm}-{network}-{interface}
    """
    if legacy:
        return _object_name(network_name, vm_name, "lsp")
    return _object_name(vm_name, network_name, interface_name)


def candidate_names(
    name_func: NameFunc,
    vm_name: str,
    network_name: str,
    interface_name: str,
) -> list[str]:
    """Names to look up for an existing object, legacy first."""
    legacy = name_func(vm_name, network_name, interface_name, True)
    current = name_func(vm_name, network_name, interface_name, False)
    if legacy == current:
        return [current]
    return [legacy, current]
