"""Stack merger - reconciles fresh cluster passes with previously published stacks."""

from __future__ import annotations

from collections.abc import Iterable

from stacklens.constants.enums import StackStatus
from stacklens.models.stacks.stack_info import Stack, StackComponents


def merge_stack_with_cached(fresh: Stack, cached: Stack | None) -> Stack:
    """Merge a freshly assembled stack with the cached stack of the same identity.

    Fresh values win field by field. An empty component list, a missing
    EPP or gateway, a missing autoscaler or model is read as a partial fetch
    failure and filled from the cached stack. Status, replica totals and the
    disaggregation flag are computed from the merged components.
    """
    if cached is None or cached.id != fresh.id:
        return fresh

    fresh_components = fresh.components
    cached_components = cached.components
    components = StackComponents(
        prefill=fresh_components.prefill or cached_components.prefill,
        decode=fresh_components.decode or cached_components.decode,
        both=fresh_components.both or cached_components.both,
        epp=fresh_components.epp or cached_components.epp,
        gateway=fresh_components.gateway or cached_components.gateway,
    )
    return fresh.model_copy(
        update={
            "components": components,
            "autoscaler": fresh.autoscaler or cached.autoscaler,
            "model": fresh.model or cached.model,
        }
    )


def sort_stacks(stacks: Iterable[Stack]) -> tuple[Stack, ...]:
    """Healthy stacks first, then by name."""
    return tuple(
        sorted(
            stacks,
            key=lambda s: (s.status != StackStatus.HEALTHY, s.name.casefold()),
        )
    )


def apply_cluster_stacks(
    current: Iterable[Stack],
    cluster: str,
    fresh: Iterable[Stack],
) -> tuple[Stack, ...]:
    """Replace one cluster's subset of the published stacks.

    Stacks of other clusters are kept as they are. An empty fresh pass keeps
    the cluster's previous stacks.
    """
    current = tuple(current)
    fresh = tuple(fresh)
    if not fresh:
        return sort_stacks(current)

    cached_by_id = {s.id: s for s in current if s.cluster == cluster}
    merged = [merge_stack_with_cached(s, cached_by_id.get(s.id)) for s in fresh]
    others = [s for s in current if s.cluster != cluster]
    return sort_stacks([*others, *merged])
