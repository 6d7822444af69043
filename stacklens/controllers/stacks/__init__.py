"""Init file for stacks module."""

from stacklens.controllers.stacks.controller import (
    ClusterDiscoveryResult,
    StackController,
)
from stacklens.controllers.stacks.exceptions import (
    ClusterUnreachableError,
    StackDiscoveryError,
)
from stacklens.controllers.stacks.executor import KubectlExecutor, KubectlResponse

__all__ = [
    "ClusterDiscoveryResult",
    "ClusterUnreachableError",
    "KubectlExecutor",
    "KubectlResponse",
    "StackController",
    "StackDiscoveryError",
]
