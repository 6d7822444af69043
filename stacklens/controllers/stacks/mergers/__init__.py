"""Mergers for the stack controller."""

from stacklens.controllers.stacks.mergers.stack_merger import (
    apply_cluster_stacks,
    merge_stack_with_cached,
    sort_stacks,
)

__all__ = ["apply_cluster_stacks", "merge_stack_with_cached", "sort_stacks"]
