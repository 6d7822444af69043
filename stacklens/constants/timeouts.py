"""Timeout constants for stack discovery.

All timeout values for cluster queries.
"""

from typing import Final

# ============================================================================
# API/Cluster timeouts (string format for kubectl)
# ============================================================================

CLUSTER_REQUEST_TIMEOUT: Final = "30s"

# Process-level command timeout (must be greater than request timeout)
KUBECTL_COMMAND_TIMEOUT: Final = 45

# Headroom added on top of a configured request timeout for the process timeout
KUBECTL_COMMAND_MARGIN: Final = 15

__all__ = [
    "CLUSTER_REQUEST_TIMEOUT",
    "KUBECTL_COMMAND_MARGIN",
    "KUBECTL_COMMAND_TIMEOUT",
]
