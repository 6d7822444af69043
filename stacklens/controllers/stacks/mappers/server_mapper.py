"""Server mapper - flattens a stack into per-component server rows."""

from __future__ import annotations

from stacklens.models.stacks.server_info import ServerMetrics
from stacklens.models.stacks.stack_info import Stack, StackComponent

_SERVING_ROWS = (
    ("prefill", "Prefill"),
    ("decode", "Decode"),
    ("unified", "Server"),
)


def _row_status(component: StackComponent) -> str:
    return "running" if component.is_running else "error"


def stack_to_server_metrics(stack: Stack) -> list[ServerMetrics]:
    """Map a stack to server rows: serving groups, then EPP, then gateway.

    EPP and gateway rows always count a single replica, ready only while the
    component is running.
    """
    groups = (stack.components.prefill, stack.components.decode, stack.components.both)
    servers: list[ServerMetrics] = []
    for (suffix, label), components in zip(_SERVING_ROWS, groups):
        for i, component in enumerate(components):
            servers.append(
                ServerMetrics(
                    id=f"{stack.id}-{suffix}-{i}",
                    name=f"{label}-{i}",
                    namespace=stack.namespace,
                    cluster=stack.cluster,
                    model=component.model or stack.model or "unknown",
                    component_type="model",
                    status=_row_status(component),
                    replicas=component.replicas,
                    ready_replicas=component.ready_replicas,
                )
            )

    epp = stack.components.epp
    if epp is not None:
        servers.append(
            ServerMetrics(
                id=f"{stack.id}-epp",
                name="EPP Scheduler",
                namespace=stack.namespace,
                cluster=stack.cluster,
                model="epp",
                component_type="epp",
                status=_row_status(epp),
                replicas=1,
                ready_replicas=1 if epp.is_running else 0,
            )
        )

    gateway = stack.components.gateway
    if gateway is not None:
        servers.append(
            ServerMetrics(
                id=f"{stack.id}-gateway",
                name="Istio Gateway",
                namespace=stack.namespace,
                cluster=stack.cluster,
                model="gateway",
                component_type="gateway",
                status=_row_status(gateway),
                replicas=1,
                ready_replicas=1 if gateway.is_running else 0,
                gateway_status="running" if gateway.is_running else "stopped",
                gateway_type="istio",
            )
        )
    return servers
