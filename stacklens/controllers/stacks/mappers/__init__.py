"""Mappers for the stack controller."""

from stacklens.controllers.stacks.mappers.server_mapper import stack_to_server_metrics

__all__ = ["stack_to_server_metrics"]
