"""Role classifier - maps pods and deployments to stack component roles.

Rules are applied in priority order, first match wins:

1. explicit ``llm-d.ai/role`` label
2. name substrings ("prefill", "decode")
3. default to a unified server

Deployment discovery uses a broader vocabulary from
``stacklens.constants.patterns`` to decide whether a Deployment is an
inference workload at all, and whether it is an endpoint picker (EPP).
All functions are pure so the rule tables can be tested in isolation.
"""

from __future__ import annotations

from typing import Any

from stacklens.constants.enums import ComponentRole
from stacklens.constants.patterns import (
    DECODE_NAME_TOKEN,
    DECODE_ROLE_VALUES,
    EPP_DEPLOYMENT_NAME_TOKENS,
    EPP_NAME_SUFFIXES,
    EPP_NAME_TOKENS,
    NAMESPACE_SCOPED_NAME_TOKENS,
    PREFILL_NAME_TOKEN,
    PREFILL_ROLE_VALUES,
    SERVING_DEPLOYMENT_NAME_SUFFIXES,
    SERVING_DEPLOYMENT_NAME_TOKENS,
    SERVING_NAMESPACE_TOKENS,
    SERVING_TEMPLATE_LABELS,
    UNIFIED_ROLE_VALUES,
)
from stacklens.constants.values import ROLE_LABEL


def _metadata(resource: dict[str, Any]) -> dict[str, Any]:
    metadata = resource.get("metadata")
    return metadata if isinstance(metadata, dict) else {}


def resource_name(resource: dict[str, Any]) -> str:
    return str(_metadata(resource).get("name") or "")


def resource_namespace(resource: dict[str, Any]) -> str:
    return str(_metadata(resource).get("namespace") or "")


def resource_labels(resource: dict[str, Any]) -> dict[str, str]:
    labels = _metadata(resource).get("labels")
    return labels if isinstance(labels, dict) else {}


def template_labels(deployment: dict[str, Any]) -> dict[str, str]:
    """Return ``spec.template.metadata.labels`` of a Deployment."""
    spec = deployment.get("spec")
    template = spec.get("template") if isinstance(spec, dict) else None
    metadata = template.get("metadata") if isinstance(template, dict) else None
    labels = metadata.get("labels") if isinstance(metadata, dict) else None
    return labels if isinstance(labels, dict) else {}


def role_from_label(value: str | None) -> ComponentRole | None:
    """Map a role label value to a role, or None when it is unrecognized."""
    role = (value or "").strip().lower()
    if role in PREFILL_ROLE_VALUES:
        return ComponentRole.PREFILL
    if role in DECODE_ROLE_VALUES:
        return ComponentRole.DECODE
    if role in UNIFIED_ROLE_VALUES:
        return ComponentRole.BOTH
    return None


def role_from_name(name: str) -> ComponentRole | None:
    lowered = name.lower()
    if PREFILL_NAME_TOKEN in lowered:
        return ComponentRole.PREFILL
    if DECODE_NAME_TOKEN in lowered:
        return ComponentRole.DECODE
    return None


def classify_pod_role(pod: dict[str, Any]) -> ComponentRole:
    """Classify a role-labeled pod as prefill, decode or unified."""
    return (
        role_from_label(resource_labels(pod).get(ROLE_LABEL))
        or role_from_name(resource_name(pod))
        or ComponentRole.BOTH
    )


def is_serving_namespace(namespace: str) -> bool:
    """Heuristic: does the namespace name look like it hosts inference serving."""
    lowered = namespace.lower()
    return any(token in lowered for token in SERVING_NAMESPACE_TOKENS)


def is_epp_name(name: str) -> bool:
    """Endpoint-picker naming convention (``foo-epp``, ``fooepp``)."""
    lowered = name.lower()
    return any(token in lowered for token in EPP_NAME_TOKENS) or lowered.endswith(
        EPP_NAME_SUFFIXES
    )


def is_epp_deployment(deployment: dict[str, Any]) -> bool:
    lowered = resource_name(deployment).lower()
    return is_epp_name(lowered) or any(
        token in lowered for token in EPP_DEPLOYMENT_NAME_TOKENS
    )


def _has_serving_label(labels: dict[str, str]) -> bool:
    for key, expected in SERVING_TEMPLATE_LABELS:
        value = labels.get(key)
        if expected is None and value:
            return True
        if expected is not None and value == expected:
            return True
    return False


def is_serving_deployment(deployment: dict[str, Any]) -> bool:
    """Decide whether a Deployment is part of an inference serving stack."""
    name = resource_name(deployment).lower()
    if any(token in name for token in SERVING_DEPLOYMENT_NAME_TOKENS):
        return True
    if name.endswith(SERVING_DEPLOYMENT_NAME_SUFFIXES):
        return True
    if _has_serving_label(template_labels(deployment)):
        return True
    return is_serving_namespace(resource_namespace(deployment)) and any(
        token in name for token in NAMESPACE_SCOPED_NAME_TOKENS
    )


def classify_deployment_role(deployment: dict[str, Any]) -> ComponentRole:
    """Classify a serving Deployment found without role-labeled pods."""
    if is_epp_deployment(deployment):
        return ComponentRole.EPP
    label_role = role_from_label(template_labels(deployment).get(ROLE_LABEL))
    if label_role in (ComponentRole.PREFILL, ComponentRole.DECODE):
        return label_role
    return role_from_name(resource_name(deployment)) or ComponentRole.BOTH
