"""Tests for merging fresh stacks with cached ones."""

from __future__ import annotations

from stacklens.constants.enums import (
    AutoscalerKind,
    ComponentRole,
    ComponentStatus,
    StackStatus,
)
from stacklens.controllers.stacks.mergers.stack_merger import (
    apply_cluster_stacks,
    merge_stack_with_cached,
    sort_stacks,
)
from stacklens.models.stacks.stack_info import (
    AutoscalerInfo,
    Stack,
    StackComponent,
    StackComponents,
)


def _component(
    name: str,
    role: ComponentRole,
    replicas: int = 1,
    ready: int = 1,
    status: ComponentStatus = ComponentStatus.RUNNING,
    namespace: str = "llm-d",
    cluster: str = "c1",
) -> StackComponent:
    return StackComponent(
        name=name,
        namespace=namespace,
        cluster=cluster,
        role=role,
        status=status,
        replicas=replicas,
        ready_replicas=ready,
    )


def _stack(
    namespace: str = "llm-d",
    cluster: str = "c1",
    prefill: int = 0,
    decode: int = 0,
    both: int = 0,
    **kwargs: object,
) -> Stack:
    def group(role: ComponentRole, count: int) -> tuple[StackComponent, ...]:
        return tuple(
            _component(f"{role.value}-{i}", role, namespace=namespace, cluster=cluster)
            for i in range(count)
        )

    components = StackComponents(
        prefill=group(ComponentRole.PREFILL, prefill),
        decode=group(ComponentRole.DECODE, decode),
        both=group(ComponentRole.BOTH, both),
    )
    return Stack.build(namespace, cluster, components, **kwargs)  # type: ignore[arg-type]


class TestMergeStackWithCached:
    """Tests for field-by-field merge."""

    def test_no_cached_returns_fresh(self) -> None:
        fresh = _stack(both=1)
        assert merge_stack_with_cached(fresh, None) is fresh

    def test_empty_prefill_falls_back_to_cached(self) -> None:
        cached = _stack(prefill=2, decode=1)
        fresh = _stack(decode=1)

        merged = merge_stack_with_cached(fresh, cached)

        assert merged.components.prefill == cached.components.prefill
        assert merged.has_disaggregation is True

    def test_fresh_values_win(self) -> None:
        cached = _stack(both=2, model="old")
        fresh = _stack(both=1, model="new")

        merged = merge_stack_with_cached(fresh, cached)

        assert len(merged.components.both) == 1
        assert merged.model == "new"

    def test_optional_fields_fall_back(self) -> None:
        autoscaler = AutoscalerInfo(kind=AutoscalerKind.HPA, name="hpa")
        epp = _component("epp", ComponentRole.EPP)
        cached = Stack.build(
            "llm-d",
            "c1",
            StackComponents(epp=epp),
            model="llama",
            autoscaler=autoscaler,
        )
        fresh = _stack(both=1)

        merged = merge_stack_with_cached(fresh, cached)

        assert merged.components.epp == epp
        assert merged.autoscaler == autoscaler
        assert merged.model == "llama"

    def test_derived_fields_recomputed(self) -> None:
        cached = _stack(prefill=1)
        failing = _component(
            "decode-0",
            ComponentRole.DECODE,
            replicas=2,
            ready=0,
            status=ComponentStatus.ERROR,
        )
        fresh = Stack.build("llm-d", "c1", StackComponents(decode=(failing,)))

        merged = merge_stack_with_cached(fresh, cached)

        assert merged.total_replicas == 3
        assert merged.ready_replicas == 1
        assert merged.status is StackStatus.DEGRADED
        assert merged.has_disaggregation is True

    def test_merge_is_idempotent(self) -> None:
        cached = _stack(prefill=2, model="llama")
        fresh = _stack(decode=1)
        once = merge_stack_with_cached(fresh, cached)
        assert merge_stack_with_cached(once, cached) == once

    def test_totals_match_components(self) -> None:
        merged = merge_stack_with_cached(_stack(decode=2), _stack(prefill=3, both=1))
        serving = merged.components.serving()
        assert merged.total_replicas == sum(c.replicas for c in serving)
        assert merged.ready_replicas == sum(c.ready_replicas for c in serving)


class TestApplyClusterStacks:
    """Tests for per-cluster replacement of the published set."""

    def test_empty_fresh_keeps_current(self) -> None:
        current = (_stack("a", both=1), _stack("b", both=1), _stack("c", both=1))
        assert apply_cluster_stacks(current, "c1", []) == sort_stacks(current)

    def test_other_clusters_untouched(self) -> None:
        other = _stack("llm-d", "c2", both=2)
        current = (_stack("llm-d", "c1", both=1), other)
        fresh = [_stack("llm-d", "c1", both=3)]

        result = apply_cluster_stacks(current, "c1", fresh)

        assert other in result
        c1 = next(s for s in result if s.cluster == "c1")
        assert len(c1.components.both) == 3

    def test_stale_cluster_stacks_dropped(self) -> None:
        current = (_stack("gone", "c1", both=1),)
        result = apply_cluster_stacks(current, "c1", [_stack("new", "c1", both=1)])
        assert [s.namespace for s in result] == ["new"]

    def test_cached_used_for_merge(self) -> None:
        current = (_stack("llm-d", "c1", prefill=1, decode=1),)
        result = apply_cluster_stacks(current, "c1", [_stack("llm-d", "c1", decode=2)])
        (merged,) = result
        assert len(merged.components.prefill) == 1
        assert len(merged.components.decode) == 2


class TestSortStacks:
    """Tests for healthy-first ordering."""

    def test_healthy_first_then_name(self) -> None:
        unhealthy = Stack.build(
            "aaa",
            "c1",
            StackComponents(
                both=(
                    _component(
                        "x",
                        ComponentRole.BOTH,
                        ready=0,
                        status=ComponentStatus.ERROR,
                        namespace="aaa",
                    ),
                )
            ),
        )
        healthy_b = _stack("Bbb", both=1)
        healthy_a = _stack("abc", both=1)

        ordered = sort_stacks([unhealthy, healthy_b, healthy_a])

        assert [s.namespace for s in ordered] == ["abc", "Bbb", "aaa"]
