"""Shared type aliases for the core and service layers."""
from typing import Literal

Severity = Literal["ERROR", "WARNING", "INFO"]

__all__ = ["Severity"]
