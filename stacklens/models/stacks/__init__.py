"""Stack models."""

from stacklens.models.stacks.server_info import ServerMetrics
from stacklens.models.stacks.snapshot import StackSnapshot
from stacklens.models.stacks.stack_info import (
    AutoscalerInfo,
    Stack,
    StackComponent,
    StackComponents,
    compute_stack_status,
    stack_id,
)

__all__ = [
    "AutoscalerInfo",
    "ServerMetrics",
    "Stack",
    "StackComponent",
    "StackComponents",
    "StackSnapshot",
    "compute_stack_status",
    "stack_id",
]
