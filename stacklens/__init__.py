"""StackLens - discovery of llm-d inference serving stacks across clusters."""

__version__ = "0.1.0"
