"""Utility functions for StackLens."""

from stacklens.utils.demo_stacks import create_demo_stacks

__all__ = ["create_demo_stacks"]
