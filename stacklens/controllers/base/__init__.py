"""Base controller classes."""

from stacklens.controllers.base.base_controller import BaseController

__all__ = ["BaseController"]
