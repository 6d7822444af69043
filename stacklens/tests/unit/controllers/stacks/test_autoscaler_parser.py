"""Tests for autoscaler detection and precedence."""

from __future__ import annotations

from typing import Any

from stacklens.constants.enums import AutoscalerKind
from stacklens.controllers.stacks.parsers.autoscaler_parser import (
    AutoscalerIndex,
    parse_hpa,
    parse_wva,
)


def _resource(name: str, namespace: str, **sections: Any) -> dict[str, Any]:
    return {"metadata": {"name": name, "namespace": namespace}, **sections}


class TestAutoscalerPrecedence:
    """Tests for WVA > HPA > VPA selection."""

    def test_wva_beats_hpa(self) -> None:
        index = AutoscalerIndex.from_resources(
            hpas=[_resource("llm-hpa", "llm-d")],
            wvas=[_resource("llm-wva", "llm-d")],
            vpas=[],
        )
        info = index.detect("llm-d")
        assert info is not None
        assert info.kind is AutoscalerKind.WVA
        assert info.name == "llm-wva"

    def test_hpa_beats_vpa(self) -> None:
        index = AutoscalerIndex.from_resources(
            hpas=[_resource("llm-hpa", "llm-d")],
            wvas=[],
            vpas=[_resource("llm-vpa", "llm-d")],
        )
        info = index.detect("llm-d")
        assert info is not None
        assert info.kind is AutoscalerKind.HPA

    def test_vpa_only(self) -> None:
        index = AutoscalerIndex.from_resources([], [], [_resource("v", "llm-d")])
        info = index.detect("llm-d")
        assert info is not None
        assert info.kind is AutoscalerKind.VPA
        assert info.min_replicas is None

    def test_none(self) -> None:
        index = AutoscalerIndex.from_resources([], [], [])
        assert index.detect("llm-d") is None

    def test_first_hpa_per_namespace_wins(self) -> None:
        index = AutoscalerIndex.from_resources(
            [_resource("first", "llm-d"), _resource("second", "llm-d")], [], []
        )
        info = index.detect("llm-d")
        assert info is not None
        assert info.name == "first"

    def test_last_wva_per_namespace_wins(self) -> None:
        index = AutoscalerIndex.from_resources(
            [], [_resource("first", "llm-d"), _resource("second", "llm-d")], []
        )
        info = index.detect("llm-d")
        assert info is not None
        assert info.name == "second"

    def test_wva_matched_by_scale_target_namespace(self) -> None:
        wva = _resource(
            "remote-wva",
            "wva-system",
            spec={"scaleTargetRef": {"namespace": "llm-d"}},
        )
        index = AutoscalerIndex.from_resources(
            [_resource("llm-hpa", "llm-d")], [wva], []
        )
        info = index.detect("llm-d")
        assert info is not None
        assert info.kind is AutoscalerKind.WVA


class TestAutoscalerParsing:
    """Tests for bounds and replica extraction."""

    def test_parse_hpa(self) -> None:
        hpa = _resource(
            "h",
            "ns",
            spec={"minReplicas": 1, "maxReplicas": 8},
            status={"currentReplicas": 3, "desiredReplicas": 4},
        )
        info = parse_hpa(hpa)
        assert (info.min_replicas, info.max_replicas) == (1, 8)
        assert (info.current_replicas, info.desired_replicas) == (3, 4)

    def test_parse_wva_prefers_optimized_alloc(self) -> None:
        wva = _resource(
            "w",
            "ns",
            spec={"minReplicas": 0, "maxReplicas": 10},
            status={
                "currentReplicas": 2,
                "desiredReplicas": 3,
                "desiredOptimizedAlloc": {"numReplicas": 5},
            },
        )
        info = parse_wva(wva)
        assert info.min_replicas == 0
        assert info.desired_replicas == 5

    def test_parse_wva_falls_back_to_desired_replicas(self) -> None:
        wva = _resource("w", "ns", status={"desiredReplicas": 3})
        assert parse_wva(wva).desired_replicas == 3

    def test_parse_tolerates_missing_sections(self) -> None:
        info = parse_hpa(_resource("h", "ns", spec=None))
        assert info.max_replicas is None
        assert info.current_replicas is None
