"""Data models for StackLens."""
