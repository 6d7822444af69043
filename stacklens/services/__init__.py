"""Services for StackLens."""

from stacklens.services.discovery_service import (
    StackDiscoveryService,
    StackSubscription,
)
from stacklens.services.selection import StackSelection

__all__ = ["StackDiscoveryService", "StackSelection", "StackSubscription"]
