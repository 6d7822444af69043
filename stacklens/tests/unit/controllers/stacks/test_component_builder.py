"""Tests for component building from pods and deployments."""

from __future__ import annotations

from typing import Any

from stacklens.constants.enums import ComponentRole, ComponentStatus
from stacklens.controllers.stacks.parsers.component_builder import (
    build_deployment_components,
    build_epp_from_service,
    build_gateway_component,
    build_pod_components,
    deployment_replica_counts,
    infer_workload_name,
    is_pod_ready,
    pod_group_key,
)


def _pod(
    name: str,
    template_hash: str | None = "7d9f8c",
    ready: bool = True,
    phase: str = "Running",
) -> dict[str, Any]:
    labels = {"llm-d.ai/role": "decode"}
    if template_hash is not None:
        labels["pod-template-hash"] = template_hash
    return {
        "metadata": {"name": name, "namespace": "llm-d", "labels": labels},
        "status": {"phase": phase, "containerStatuses": [{"ready": ready}]},
    }


def _deployment(
    name: str,
    replicas: int | None = 1,
    ready: int | None = 1,
    labels: dict[str, str] | None = None,
) -> dict[str, Any]:
    spec: dict[str, Any] = {"template": {"metadata": {"labels": labels or {}}}}
    if replicas is not None:
        spec["replicas"] = replicas
    status: dict[str, Any] = {}
    if ready is not None:
        status["readyReplicas"] = ready
    return {
        "metadata": {"name": name, "namespace": "llm-d"},
        "spec": spec,
        "status": status,
    }


class TestPodReadiness:
    """Tests for pod readiness and grouping helpers."""

    def test_ready_pod(self) -> None:
        assert is_pod_ready(_pod("a")) is True

    def test_not_running(self) -> None:
        assert is_pod_ready(_pod("a", phase="Pending")) is False

    def test_container_not_ready(self) -> None:
        assert is_pod_ready(_pod("a", ready=False)) is False

    def test_missing_container_statuses(self) -> None:
        pod = {"metadata": {"name": "a"}, "status": {"phase": "Running"}}
        assert is_pod_ready(pod) is False

    def test_group_key_falls_back(self) -> None:
        pod = _pod("a", template_hash=None)
        assert pod_group_key(pod) == "default"
        pod["metadata"]["labels"]["controller-revision-hash"] = "rev1"
        assert pod_group_key(pod) == "rev1"

    def test_infer_workload_name_from_hash(self) -> None:
        assert infer_workload_name(_pod("llama-decode-7d9f8c-x2k4p")) == "llama-decode"

    def test_infer_workload_name_without_hash(self) -> None:
        pod = _pod("vllm-decode-0", template_hash=None)
        assert infer_workload_name(pod) == "vllm-decode"


class TestBuildPodComponents:
    """Tests for grouping pods into components."""

    def test_groups_by_template_hash(self) -> None:
        pods = [
            _pod("a-h1-1", template_hash="h1"),
            _pod("b-h2-1", template_hash="h2"),
            _pod("a-h1-2", template_hash="h1", ready=False),
        ]

        components = build_pod_components(
            pods, ComponentRole.DECODE, "llm-d", "c1", model="llama"
        )

        assert [c.name for c in components] == ["a", "b"]
        first = components[0]
        assert first.replicas == 2
        assert first.ready_replicas == 1
        assert first.status is ComponentStatus.RUNNING
        assert first.pod_names == ("a-h1-1", "a-h1-2")
        assert first.model == "llama"
        assert first.cluster == "c1"

    def test_group_with_no_ready_pods_is_error(self) -> None:
        pods = [_pod("a-h1-1", ready=False), _pod("a-h1-2", phase="Pending")]
        (component,) = build_pod_components(pods, ComponentRole.DECODE, "llm-d", "c1")
        assert component.status is ComponentStatus.ERROR
        assert component.ready_replicas == 0

    def test_empty(self) -> None:
        assert build_pod_components([], ComponentRole.PREFILL, "llm-d", "c1") == []


class TestBuildDeploymentComponents:
    """Tests for the deployment fallback."""

    def test_replica_counts_prefer_spec(self) -> None:
        dep = _deployment("x", replicas=3, ready=5)
        assert deployment_replica_counts(dep) == (3, 3)

    def test_replica_counts_fall_back_to_status(self) -> None:
        dep = _deployment("x", replicas=None, ready=None)
        dep["status"]["replicas"] = 2
        assert deployment_replica_counts(dep) == (2, 0)

    def test_unified_server(self) -> None:
        result = build_deployment_components(
            [_deployment("vllm-server", replicas=3, ready=3)], "llm-d", "c1"
        )
        assert result.prefill == []
        assert result.decode == []
        (server,) = result.both
        assert server.role is ComponentRole.BOTH
        assert (server.replicas, server.ready_replicas) == (3, 3)
        assert server.status is ComponentStatus.RUNNING

    def test_zero_ready_is_error(self) -> None:
        result = build_deployment_components(
            [_deployment("vllm-decode", replicas=2, ready=0)], "llm-d", "c1"
        )
        assert result.decode[0].status is ComponentStatus.ERROR

    def test_first_epp_wins(self) -> None:
        result = build_deployment_components(
            [
                _deployment("gaie-epp", replicas=1, ready=0),
                _deployment("other-epp", replicas=1, ready=1),
            ],
            "llm-d",
            "c1",
        )
        assert result.epp is not None
        assert result.epp.name == "gaie-epp"
        assert result.epp.status is ComponentStatus.PENDING
        assert [c.name for c in result.both] == ["other-epp"]

    def test_model_from_template_label(self) -> None:
        result = build_deployment_components(
            [_deployment("vllm-a", labels={"llmd.org/model": "granite"})],
            "llm-d",
            "c1",
            model="fallback",
        )
        assert result.both[0].model == "granite"


class TestEppAndGateway:
    """Tests for EPP service and gateway components."""

    def test_epp_from_service(self) -> None:
        service = {"metadata": {"name": "pool-epp", "namespace": "llm-d"}}
        epp = build_epp_from_service(service, "llm-d", "c1")
        assert epp.role is ComponentRole.EPP
        assert epp.status is ComponentStatus.RUNNING
        assert (epp.replicas, epp.ready_replicas) == (1, 1)

    def test_gateway_with_address(self) -> None:
        gateway = {
            "metadata": {"name": "gw"},
            "status": {"addresses": [{"value": "10.0.0.1"}]},
        }
        component = build_gateway_component(gateway, "llm-d", "c1")
        assert component.status is ComponentStatus.RUNNING
        assert component.ready_replicas == 1

    def test_gateway_without_address(self) -> None:
        component = build_gateway_component({"metadata": {"name": "gw"}}, "llm-d", "c1")
        assert component.status is ComponentStatus.PENDING
        assert (component.replicas, component.ready_replicas) == (1, 0)
