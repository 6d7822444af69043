"""All enum definitions for stack discovery.

This module consolidates all enumerations used throughout the engine.
"""

from enum import Enum

# =============================================================================
# Component Enums
# =============================================================================

class ComponentRole(Enum):
    """Role a replica group plays inside an inference serving stack."""

    PREFILL = "prefill"
    DECODE = "decode"
    BOTH = "both"
    EPP = "epp"
    GATEWAY = "gateway"


class ComponentStatus(Enum):
    """Readiness of a single stack component."""

    RUNNING = "running"
    PENDING = "pending"
    ERROR = "error"
    UNKNOWN = "unknown"


# =============================================================================
# Stack Enums
# =============================================================================

class StackStatus(Enum):
    """Health of a whole stack, derived from its components."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


class AutoscalerKind(Enum):
    """Replica-count controllers that may govern a stack."""

    HPA = "HPA"
    WVA = "WVA"
    VPA = "VPA"


# =============================================================================
# Fetch Enums
# =============================================================================

class QueryFailure(Enum):
    """Classification of a failed cluster query."""

    NONE = "none"
    CONNECTIVITY = "connectivity"
    COMMAND = "command"
    MALFORMED = "malformed"


class ResourceKind(Enum):
    """Resource kinds read on every cluster pass."""

    PODS = "pods"
    INFERENCE_POOLS = "inference_pools"
    SERVICES = "services"
    GATEWAYS = "gateways"
    HPAS = "hpas"
    WVAS = "wvas"
    VPAS = "vpas"
    DEPLOYMENTS = "deployments"
