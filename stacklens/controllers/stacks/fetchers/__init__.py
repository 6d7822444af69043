"""Fetchers for the stack controller."""

from stacklens.controllers.stacks.fetchers.resource_fetcher import (
    ClusterResources,
    ResourceFetcher,
)

__all__ = ["ClusterResources", "ResourceFetcher"]
