"""Error taxonomy shared by the registry and its request façade."""

from __future__ import annotations

from typing import Sequence, Tuple


class RegistryError(Exception):
    """Base class for expected, caller-recoverable registry failures."""


class ValidationError(RegistryError):
    """Raised when creation data fails the required-field checks."""

    def __init__(self, fields: Sequence[str]) -> None:
        self.fields: Tuple[str, ...] = tuple(fields)
        if len(self.fields) == 1:
            message = f"Field '{self.fields[0]}' is required and must not be empty"
        else:
            joined = "', '".join(self.fields)
            message = f"Fields '{joined}' are required and must not be empty"
        super().__init__(message)


class InvalidIdentifierError(RegistryError):
    """Raised when an identifier is not a well-formed positive integer."""

    def __init__(self, identifier: object) -> None:
        self.identifier = identifier
        super().__init__(f"Invalid resource identifier: {identifier!r}")


class NotFoundError(RegistryError):
    def __init__(self, identifier: int) -> None:
        self.identifier = identifier
        super().__init__(f"Resource {identifier} not found")


__all__ = [
    "InvalidIdentifierError",
    "NotFoundError",
    "RegistryError",
    "ValidationError",
]
