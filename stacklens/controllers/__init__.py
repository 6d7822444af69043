"""Controllers module for StackLens.

This module provides the per-cluster controllers that read Kubernetes
resources and assemble inference serving stacks from them.
"""

from __future__ import annotations

# Base classes
from stacklens.controllers.base import BaseController

# Stacks domain
from stacklens.controllers.stacks.controller import (
    ClusterDiscoveryResult,
    StackController,
)

__all__ = [
    # Base
    "BaseController",
    # Stacks domain
    "ClusterDiscoveryResult",
    "StackController",
]
