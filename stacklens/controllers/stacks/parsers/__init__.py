"""Parsers for the stack controller."""

from stacklens.controllers.stacks.parsers.autoscaler_parser import AutoscalerIndex
from stacklens.controllers.stacks.parsers.stack_assembler import StackAssembler

__all__ = ["AutoscalerIndex", "StackAssembler"]
