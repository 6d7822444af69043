"""Autoscaler detector - picks the autoscaler governing a stack namespace."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from stacklens.constants.enums import AutoscalerKind
from stacklens.controllers.stacks.parsers.role_classifier import (
    resource_name,
    resource_namespace,
)
from stacklens.models.stacks.stack_info import AutoscalerInfo


def _section(resource: dict[str, Any], key: str) -> dict[str, Any]:
    value = resource.get(key)
    return value if isinstance(value, dict) else {}


def _optional_int(value: Any) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass
class AutoscalerIndex:
    """Autoscalers of one cluster indexed by namespace.

    Precedence when detecting: a VariantAutoscaling (WVA) in the namespace, or
    one whose scale target lives in the namespace, then an HPA, then a VPA.
    """

    hpa_by_namespace: dict[str, dict[str, Any]] = field(default_factory=dict)
    wva_by_namespace: dict[str, dict[str, Any]] = field(default_factory=dict)
    wva_by_target_namespace: dict[str, dict[str, Any]] = field(default_factory=dict)
    vpa_by_namespace: dict[str, dict[str, Any]] = field(default_factory=dict)

    @classmethod
    def from_resources(
        cls,
        hpas: list[dict[str, Any]],
        wvas: list[dict[str, Any]],
        vpas: list[dict[str, Any]],
    ) -> AutoscalerIndex:
        index = cls()
        for hpa in hpas:
            # First HPA per namespace wins.
            index.hpa_by_namespace.setdefault(resource_namespace(hpa), hpa)
        for wva in wvas:
            namespace = resource_namespace(wva)
            index.wva_by_namespace[namespace] = wva
            target_ref = _section(_section(wva, "spec"), "scaleTargetRef")
            target_namespace = target_ref.get("namespace")
            if target_namespace and target_namespace != namespace:
                index.wva_by_target_namespace[str(target_namespace)] = wva
        for vpa in vpas:
            index.vpa_by_namespace[resource_namespace(vpa)] = vpa
        return index

    def detect(self, namespace: str) -> AutoscalerInfo | None:
        """Return the single autoscaler for a namespace, if any."""
        wva = self.wva_by_namespace.get(namespace) or self.wva_by_target_namespace.get(
            namespace
        )
        if wva is not None:
            return parse_wva(wva)
        hpa = self.hpa_by_namespace.get(namespace)
        if hpa is not None:
            return parse_hpa(hpa)
        vpa = self.vpa_by_namespace.get(namespace)
        if vpa is not None:
            return AutoscalerInfo(kind=AutoscalerKind.VPA, name=resource_name(vpa))
        return None


def parse_wva(wva: dict[str, Any]) -> AutoscalerInfo:
    spec = _section(wva, "spec")
    status = _section(wva, "status")
    desired = _optional_int(_section(status, "desiredOptimizedAlloc").get("numReplicas"))
    if desired is None:
        desired = _optional_int(status.get("desiredReplicas"))
    return AutoscalerInfo(
        kind=AutoscalerKind.WVA,
        name=resource_name(wva),
        min_replicas=_optional_int(spec.get("minReplicas")),
        max_replicas=_optional_int(spec.get("maxReplicas")),
        current_replicas=_optional_int(status.get("currentReplicas")),
        desired_replicas=desired,
    )


def parse_hpa(hpa: dict[str, Any]) -> AutoscalerInfo:
    spec = _section(hpa, "spec")
    status = _section(hpa, "status")
    return AutoscalerInfo(
        kind=AutoscalerKind.HPA,
        name=resource_name(hpa),
        min_replicas=_optional_int(spec.get("minReplicas")),
        max_replicas=_optional_int(spec.get("maxReplicas")),
        current_replicas=_optional_int(status.get("currentReplicas")),
        desired_replicas=_optional_int(status.get("desiredReplicas")),
    )
