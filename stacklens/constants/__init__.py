"""Constants module for StackLens.

Centralized constants organized by domain:
- enums.py: All Enum class definitions
- values.py: Scalar constants (labels, storage keys)
- patterns.py: Versioned classification rule tables
- timeouts.py: Timeout and interval values
- limits.py: Limit values (max/min)
- defaults.py: Default values for settings
"""

from stacklens.constants.defaults import (
    CACHE_TTL_DEFAULT,
    REFRESH_INTERVAL_DEFAULT,
    REQUEST_TIMEOUT_DEFAULT,
)
from stacklens.constants.enums import (
    AutoscalerKind,
    ComponentRole,
    ComponentStatus,
    QueryFailure,
    ResourceKind,
    StackStatus,
)
from stacklens.constants.limits import REFRESH_INTERVAL_MIN
from stacklens.constants.patterns import ROLE_RULES_VERSION
from stacklens.constants.timeouts import (
    CLUSTER_REQUEST_TIMEOUT,
    KUBECTL_COMMAND_MARGIN,
    KUBECTL_COMMAND_TIMEOUT,
)
from stacklens.constants.values import APP_TITLE, CACHE_KEY, ROLE_LABEL

__all__ = [
    # Application
    "APP_TITLE",
    "CACHE_KEY",
    "CACHE_TTL_DEFAULT",
    "CLUSTER_REQUEST_TIMEOUT",
    "KUBECTL_COMMAND_MARGIN",
    "KUBECTL_COMMAND_TIMEOUT",
    "REFRESH_INTERVAL_DEFAULT",
    "REFRESH_INTERVAL_MIN",
    "REQUEST_TIMEOUT_DEFAULT",
    "ROLE_LABEL",
    "ROLE_RULES_VERSION",
    # Enums
    "AutoscalerKind",
    "ComponentRole",
    "ComponentStatus",
    "QueryFailure",
    "ResourceKind",
    "StackStatus",
]
