"""Routing: sink selection and failure containment."""

from .error_handler import ErrorHandler
from .router import Router, format_diagnostic

__all__ = ["Router", "ErrorHandler", "format_diagnostic"]
