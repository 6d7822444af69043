"""Limit and threshold constants.

All limit values and validation ranges.
"""

from typing import Final

# ============================================================================
# Validation limits
# ============================================================================

REFRESH_INTERVAL_MIN: Final = 5
REQUEST_TIMEOUT_MIN: Final = 1
REQUEST_TIMEOUT_MAX: Final = 300

# ============================================================================
# Subscription limits
# ============================================================================

SUBSCRIPTION_QUEUE_SIZE: Final = 16

__all__ = [
    "REFRESH_INTERVAL_MIN",
    "REQUEST_TIMEOUT_MAX",
    "REQUEST_TIMEOUT_MIN",
    "SUBSCRIPTION_QUEUE_SIZE",
]
