"""In-memory resource registry with a uniform request/response façade."""

from __future__ import annotations

from typing import Any

__version__ = "1.0.0"

from .errors import InvalidIdentifierError, NotFoundError, RegistryError, ValidationError
from .models import Record
from .registry import ResourceRegistry


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the HTTP application."""

    from .api import create_app as _create_app

    return _create_app(*args, **kwargs)


__all__ = [
    "InvalidIdentifierError",
    "NotFoundError",
    "Record",
    "RegistryError",
    "ResourceRegistry",
    "ValidationError",
    "create_app",
]
