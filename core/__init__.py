"""Core primitives — result type and logging.

This package is framework-agnostic. It must NEVER import from ``bot/`` or ``sdk/``.
"""

from core.logger import CourierLogger
from core.result import NO_UPDATE, DecodeError, Failure, Result, Success

__all__ = [
    "CourierLogger",
    "Result",
    "Success",
    "Failure",
    "DecodeError",
    "NO_UPDATE",
]
