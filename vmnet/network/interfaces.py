"""Create and wait for a VM's network interfaces.

For each desired interface the configured backend resolves (looks up or
creates) a provisioning request, then the reconciler waits for every
request to become ready and normalizes the results.

All interfaces are resolved sequentially before any waiting starts, so an
interface that can never succeed (e.g. a missing named network) fails the
call immediately. Waits then run concurrently. The call is all-or-nothing:
either every interface is ready and results come back in input order, or
the first failing interface's error is raised and no results are returned.
Nothing is retried within a call; the caller's reconcile loop re-drives the
whole VM later.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Sequence

from vmnet.clients import Inventory, ObjectStore
from vmnet.config import NetworkEnvironment, settings
from vmnet.errors import InterfaceError, InvalidAddressError, NetworkError
from vmnet.metrics import interface_errors, interface_wait_duration
from vmnet.models import (
    ClusterRef,
    DesiredInterfaceSpec,
    NetworkInterfaceResult,
    NetworkInterfaceResults,
    VMContext,
)
from vmnet.network.addressing import parse_cidr
from vmnet.network.backends.base import BackendRequest, NetworkBackend
from vmnet.network.backends.registry import build_network_backend, get_network_backend
from vmnet.network.readiness import ReadinessResult, wait_until_ready
from vmnet.resources import Condition

logger = logging.getLogger(__name__)


class NetworkInterfaceReconciler:
    """Drives a VM's desired interfaces to ready, normalized results.

    Tunables default to the process settings and are fixed at construction.
    """

    def __init__(
        self,
        backend: NetworkBackend | None = None,
        *,
        store: ObjectStore | None = None,
        inventory: Inventory | None = None,
        environment: NetworkEnvironment | str | None = None,
        retry_timeout: float | None = None,
        poll_interval: float | None = None,
        max_concurrent_waits: int | None = None,
    ):
        if backend is None:
            if store is not None and inventory is None:
                raise ValueError("An object store was given without an inventory")
            if inventory is not None:
                backend = build_network_backend(
                    environment or settings.network_provider_type, store, inventory
                )
            else:
                backend = get_network_backend()
        self.backend = backend
        self.retry_timeout = settings.retry_timeout if retry_timeout is None else retry_timeout
        self.poll_interval = settings.poll_interval if poll_interval is None else poll_interval
        self.max_concurrent_waits = max_concurrent_waits or settings.max_concurrent_waits

    async def create_and_wait_for_network_interfaces(
        self,
        vm: VMContext,
        specs: Sequence[DesiredInterfaceSpec],
        cluster: ClusterRef | None = None,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> NetworkInterfaceResults:
        """Provision every interface of a VM and wait until all are ready.

        The retry timeout bounds the whole call: interfaces queued behind
        max_concurrent_waits only get the time that is left.

        Args:
            vm: The VM owning the interfaces
            specs: Desired interfaces, names unique within the VM
            cluster: Compute cluster the VM is placed on, if known. Without
                it, overlay interfaces come back with backing None.
            cancel_event: Optional event that stops all in-flight waits

        Returns:
            NetworkInterfaceResults in the same order as specs

        Raises:
            NetworkError: The first interface failure, in input order
        """
        started = time.monotonic()
        seen: set[str] = set()
        for spec in specs:
            if spec.name in seen:
                raise InterfaceError("duplicate interface name", spec.name)
            seen.add(spec.name)

        requests: list[BackendRequest] = []
        for spec in specs:
            try:
                requests.append(await self.backend.resolve(vm, spec))
            except Exception as e:
                raise self._fail(vm, spec, e)

        semaphore = asyncio.Semaphore(self.max_concurrent_waits)
        outcomes = await asyncio.gather(
            *(
                self._wait_for_interface(semaphore, vm, spec, request, cluster, cancel_event, started)
                for spec, request in zip(specs, requests)
            ),
            return_exceptions=True,
        )
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome

        logger.info(f"{len(outcomes)} network interface(s) ready for {vm.namespace}/{vm.name}")
        return NetworkInterfaceResults(results=list(outcomes))

    async def _wait_for_interface(
        self,
        semaphore: asyncio.Semaphore,
        vm: VMContext,
        spec: DesiredInterfaceSpec,
        request: BackendRequest,
        cluster: ClusterRef | None,
        cancel_event: asyncio.Event | None,
        started: float,
    ) -> NetworkInterfaceResult:
        async def check() -> ReadinessResult[NetworkInterfaceResult]:
            await self.backend.refresh(request)
            result, ready = self.backend.extract_result(spec, request)
            if not ready:
                return ReadinessResult(is_ready=False, message=describe_condition(
                    self.backend.ready_condition(request)
                ))
            return ReadinessResult(is_ready=True, value=result)

        async with semaphore:
            try:
                result = await wait_until_ready(
                    check,
                    timeout=self.retry_timeout,
                    interval=self.poll_interval,
                    description=spec.name,
                    cancel_event=cancel_event,
                    started=started,
                )
                result = apply_interface_spec(spec, result)
                result.backing = await self.backend.resolve_backing(result, cluster)
            except Exception as e:
                interface_wait_duration.labels(self.backend.name, "failed").observe(
                    time.monotonic() - started
                )
                raise self._fail(vm, spec, e)

            interface_wait_duration.labels(self.backend.name, "ready").observe(
                time.monotonic() - started
            )
            if result.backing is None:
                logger.info(f"Interface {vm.name}/{spec.name} ready, backing not resolvable yet")
            return result

    def _fail(self, vm: VMContext, spec: DesiredInterfaceSpec, error: Exception) -> NetworkError:
        """Record an interface failure and make sure it names the interface.

        Collaborator errors outside the NetworkError hierarchy (transport
        failures and the like) are wrapped as retriable InterfaceErrors.
        """
        if isinstance(error, InterfaceError) and error.interface_name:
            failure = error
        elif isinstance(error, NetworkError):
            failure = InterfaceError(error.message, spec.name, retriable=error.retriable)
            failure.__cause__ = error
        else:
            failure = InterfaceError(str(error) or type(error).__name__, spec.name, retriable=True)
            failure.__cause__ = error
        interface_errors.labels(self.backend.name, type(failure).__name__).inc()
        logger.error(f"Network interface failure for {vm.namespace}/{vm.name}: {failure}")
        return failure


def describe_condition(condition: Condition | None) -> str:
    """Short description of a readiness condition for logs and errors."""
    if condition is None:
        return "no Ready condition reported"
    detail = condition.reason or condition.message
    if detail:
        return f"Ready={condition.status.value}: {detail}"
    return f"Ready={condition.status.value}"


def apply_interface_spec(spec: DesiredInterfaceSpec, result: NetworkInterfaceResult) -> NetworkInterfaceResult:
    """Overlay the caller's static configuration and DHCP choices on a result.

    Static addresses replace the backend-reported ones. DHCP4 defaults to on
    unless an IPv4 static config is present; DHCP6 is opt-in. Static configs
    of a family that uses DHCP are dropped.
    """
    if spec.addresses:
        try:
            result.ip_configs = [parse_cidr(a, spec.gateway4, spec.gateway6) for a in spec.addresses]
        except InvalidAddressError as e:
            raise InvalidAddressError(e.message, spec.name) from e

    has_ipv4 = any(c.is_ipv4 for c in result.ip_configs)
    result.dhcp4 = spec.wants_dhcp4 if spec.wants_dhcp4 is not None else not has_ipv4
    result.dhcp6 = spec.wants_dhcp6
    result.ip_configs = [
        c for c in result.ip_configs
        if not (result.dhcp4 if c.is_ipv4 else result.dhcp6)
    ]

    result.nameservers = list(spec.nameservers)
    result.search_domains = list(spec.search_domains)
    result.mtu = spec.mtu
    return result


async def create_and_wait_for_network_interfaces(
    vm: VMContext,
    specs: Sequence[DesiredInterfaceSpec],
    cluster: ClusterRef | None = None,
    *,
    backend: NetworkBackend | None = None,
    cancel_event: asyncio.Event | None = None,
) -> NetworkInterfaceResults:
    """Provision a VM's interfaces with the process-wide backend and settings."""
    reconciler = NetworkInterfaceReconciler(backend)
    return await reconciler.create_and_wait_for_network_interfaces(
        vm, specs, cluster, cancel_event=cancel_event
    )
