"""Component builder - groups classified resources into stack components."""

from __future__ import annotations

from collections.abc import Iterable
from contextlib import suppress
from dataclasses import dataclass, field
from typing import Any

from stacklens.constants.enums import ComponentRole, ComponentStatus
from stacklens.constants.patterns import POD_NAME_SUFFIX_PATTERN
from stacklens.constants.values import (
    CONTROLLER_REVISION_HASH_LABEL,
    DEFAULT_GROUP_KEY,
    DEPLOYMENT_MODEL_LABEL,
    POD_TEMPLATE_HASH_LABEL,
)
from stacklens.controllers.stacks.parsers.role_classifier import (
    classify_deployment_role,
    resource_labels,
    resource_name,
    template_labels,
)
from stacklens.models.stacks.stack_info import StackComponent


@dataclass
class DeploymentComponents:
    """Components synthesized from Deployments when no labeled pods exist."""

    prefill: list[StackComponent] = field(default_factory=list)
    decode: list[StackComponent] = field(default_factory=list)
    both: list[StackComponent] = field(default_factory=list)
    epp: StackComponent | None = None


def _coerce_int(value: Any, default: int = 0) -> int:
    with suppress(TypeError, ValueError):
        return max(0, int(value))
    return default


def is_pod_ready(pod: dict[str, Any]) -> bool:
    """A pod is ready when it is Running and every container reports ready."""
    status = pod.get("status")
    if not isinstance(status, dict) or status.get("phase") != "Running":
        return False
    container_statuses = status.get("containerStatuses")
    if not isinstance(container_statuses, list):
        return False
    return all(
        isinstance(entry, dict) and entry.get("ready") is True
        for entry in container_statuses
    )


def pod_group_key(pod: dict[str, Any]) -> str:
    """Deployment identity of a pod, approximated by its template hash."""
    labels = resource_labels(pod)
    return (
        labels.get(POD_TEMPLATE_HASH_LABEL)
        or labels.get(CONTROLLER_REVISION_HASH_LABEL)
        or DEFAULT_GROUP_KEY
    )


def infer_workload_name(pod: dict[str, Any]) -> str:
    """Infer the owning workload name from a generated pod name."""
    name = resource_name(pod)
    template_hash = resource_labels(pod).get(POD_TEMPLATE_HASH_LABEL)
    if template_hash:
        marker = f"-{template_hash}-"
        if marker in name:
            workload = name.split(marker, 1)[0]
            if workload:
                return workload
    return POD_NAME_SUFFIX_PATTERN.sub("", name) or name


def group_pods(pods: Iterable[dict[str, Any]]) -> list[list[dict[str, Any]]]:
    """Group pods by deployment identity, keeping first-seen order."""
    groups: dict[str, list[dict[str, Any]]] = {}
    for pod in pods:
        groups.setdefault(pod_group_key(pod), []).append(pod)
    return list(groups.values())


def build_pod_components(
    pods: list[dict[str, Any]],
    role: ComponentRole,
    namespace: str,
    cluster: str,
    model: str | None = None,
) -> list[StackComponent]:
    """Build one component per deployment group of pods sharing a role.

    A group is running while at least one of its pods is ready, since partial
    availability still serves traffic; it is an error only with zero ready pods.
    """
    components: list[StackComponent] = []
    for group in group_pods(pods):
        ready = sum(1 for pod in group if is_pod_ready(pod))
        components.append(
            StackComponent(
                name=infer_workload_name(group[0]),
                namespace=namespace,
                cluster=cluster,
                role=role,
                status=ComponentStatus.RUNNING if ready > 0 else ComponentStatus.ERROR,
                replicas=len(group),
                ready_replicas=ready,
                model=model,
                pod_names=tuple(resource_name(pod) for pod in group),
            )
        )
    return components


def deployment_replica_counts(deployment: dict[str, Any]) -> tuple[int, int]:
    """Return (desired replicas, ready replicas) with ready clamped to desired."""
    spec = deployment.get("spec")
    spec = spec if isinstance(spec, dict) else {}
    status = deployment.get("status")
    status = status if isinstance(status, dict) else {}

    raw_replicas = spec.get("replicas")
    if raw_replicas is None:
        raw_replicas = status.get("replicas")
    replicas = _coerce_int(raw_replicas)
    ready = min(_coerce_int(status.get("readyReplicas")), replicas)
    return replicas, ready


def build_deployment_components(
    deployments: list[dict[str, Any]],
    namespace: str,
    cluster: str,
    model: str | None = None,
) -> DeploymentComponents:
    """Synthesize components directly from Deployment status fields.

    The first Deployment classified as an endpoint picker becomes the EPP;
    any further EPP-looking Deployment is kept as a unified server so its
    replicas are not lost.
    """
    result = DeploymentComponents()
    for deployment in deployments:
        name = resource_name(deployment)
        replicas, ready = deployment_replica_counts(deployment)
        role = classify_deployment_role(deployment)

        if role is ComponentRole.EPP and result.epp is None:
            result.epp = StackComponent(
                name=name,
                namespace=namespace,
                cluster=cluster,
                role=ComponentRole.EPP,
                status=ComponentStatus.RUNNING if ready > 0 else ComponentStatus.PENDING,
                replicas=replicas,
                ready_replicas=ready,
            )
            continue

        if role is ComponentRole.EPP:
            role = ComponentRole.BOTH
        component = StackComponent(
            name=name,
            namespace=namespace,
            cluster=cluster,
            role=role,
            status=ComponentStatus.RUNNING if ready > 0 else ComponentStatus.ERROR,
            replicas=replicas,
            ready_replicas=ready,
            model=template_labels(deployment).get(DEPLOYMENT_MODEL_LABEL) or model,
        )
        if role is ComponentRole.PREFILL:
            result.prefill.append(component)
        elif role is ComponentRole.DECODE:
            result.decode.append(component)
        else:
            result.both.append(component)
    return result


def build_epp_from_service(
    service: dict[str, Any], namespace: str, cluster: str
) -> StackComponent:
    """An EPP service is assumed to be serving."""
    return StackComponent(
        name=resource_name(service),
        namespace=namespace,
        cluster=cluster,
        role=ComponentRole.EPP,
        status=ComponentStatus.RUNNING,
        replicas=1,
        ready_replicas=1,
    )


def build_gateway_component(
    gateway: dict[str, Any], namespace: str, cluster: str
) -> StackComponent:
    """A gateway is running once it has been assigned an address."""
    status = gateway.get("status")
    addresses = status.get("addresses") if isinstance(status, dict) else None
    has_address = isinstance(addresses, list) and len(addresses) > 0
    return StackComponent(
        name=resource_name(gateway),
        namespace=namespace,
        cluster=cluster,
        role=ComponentRole.GATEWAY,
        status=ComponentStatus.RUNNING if has_address else ComponentStatus.PENDING,
        replicas=1,
        ready_replicas=1 if has_address else 0,
    )
