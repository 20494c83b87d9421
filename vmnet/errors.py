"""Exceptions raised while provisioning VM network interfaces.

Nothing here is retried by the engine. A failed call is expected to be
re-driven by the caller's reconcile loop after its own backoff.
"""

from __future__ import annotations


class NetworkError(Exception):
    """Base exception for network interface provisioning errors."""
    def __init__(self, message: str, retriable: bool = False):
        super().__init__(message)
        self.message = message
        self.retriable = retriable


class InterfaceError(NetworkError):
    """Error attributed to a single VM network interface."""
    def __init__(self, message: str, interface_name: str = "", retriable: bool = False):
        if interface_name:
            message = f"interface {interface_name}: {message}"
        super().__init__(message, retriable=retriable)
        self.interface_name = interface_name


class NetworkNotFoundError(InterfaceError):
    """Named network does not exist in the inventory."""
    def __init__(self, network_name: str, interface_name: str = ""):
        super().__init__(f"unable to find named network {network_name!r}", interface_name)
        self.network_name = network_name


class NotReadyError(InterfaceError):
    """Backend object never reported Ready within the retry timeout."""
    def __init__(self, interface_name: str, elapsed: float, reason: str = ""):
        message = f"network interface is not ready yet after {elapsed:.1f}s"
        if reason:
            message = f"{message} (last reason: {reason})"
        super().__init__(message, interface_name, retriable=True)
        self.elapsed = elapsed
        self.reason = reason


class InvalidAddressError(InterfaceError):
    """Malformed address, subnet mask or CIDR literal."""


class BackingResolutionError(InterfaceError):
    """Backend network identifier does not map to an inventory backing."""


class InterfaceWaitCancelledError(InterfaceError):
    """Caller asked to stop waiting before the interface became ready."""
    def __init__(self, interface_name: str, elapsed: float):
        super().__init__(f"wait cancelled after {elapsed:.1f}s", interface_name)
        self.elapsed = elapsed


# --- Collaborator errors ---

class ObjectNotFoundError(NetworkError):
    """Object store has no object under the requested name."""
    def __init__(self, kind: str, namespace: str, name: str):
        super().__init__(f"{kind} {namespace}/{name} not found")
        self.kind = kind
        self.namespace = namespace
        self.name = name


class ObjectAlreadyExistsError(NetworkError):
    """Object store already holds an object under the requested name."""
    def __init__(self, kind: str, namespace: str, name: str):
        super().__init__(f"{kind} {namespace}/{name} already exists")
        self.kind = kind
        self.namespace = namespace
        self.name = name
