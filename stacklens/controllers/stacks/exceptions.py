"""Exceptions raised during stack discovery."""

from __future__ import annotations


class StackDiscoveryError(Exception):
    """Base exception for discovery failures."""


class ClusterUnreachableError(StackDiscoveryError):
    """Raised when a cluster cannot be reached for this pass."""

    def __init__(self, cluster: str | None, message: str) -> None:
        self.cluster = cluster
        self.message = message
        super().__init__(f"{cluster or 'current context'}: {message}")
