"""Authoritative in-memory store of records plus the identifier allocator."""

from __future__ import annotations

import logging
import re
import threading
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from .errors import InvalidIdentifierError, NotFoundError, ValidationError
from .models import Record

logger = logging.getLogger("resource_registry.registry")

_IDENTIFIER_PATTERN = re.compile(r"[+-]?[0-9]+")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _normalize_field(value: object) -> Optional[str]:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def parse_identifier(identifier: object) -> int:
    """Return ``identifier`` as a positive integer or raise :class:`InvalidIdentifierError`."""

    if isinstance(identifier, bool):
        raise InvalidIdentifierError(identifier)
    if isinstance(identifier, int):
        value = identifier
    elif isinstance(identifier, str) and _IDENTIFIER_PATTERN.fullmatch(identifier.strip()):
        try:
            value = int(identifier.strip())
        except ValueError as exc:
            raise InvalidIdentifierError(identifier) from exc
    else:
        raise InvalidIdentifierError(identifier)

    if value <= 0:
        raise InvalidIdentifierError(identifier)
    return value


class ResourceRegistry:
    """Create, look up, and list records held in process memory.

    Identifiers come from a counter that starts at 1 and only moves forward, so
    an identifier is never handed out twice for the lifetime of the instance.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._records: List[Record] = []
        self._index: Dict[int, Record] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    @property
    def next_id(self) -> int:
        with self._lock:
            return self._next_id

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def create(self, name: object, email: object) -> Record:
        cleaned_name = _normalize_field(name)
        cleaned_email = _normalize_field(email)

        if cleaned_name is None or cleaned_email is None:
            missing = [
                field
                for field, value in (("name", cleaned_name), ("email", cleaned_email))
                if value is None
            ]
            raise ValidationError(missing)

        with self._lock:
            record = Record(
                id=self._next_id,
                name=cleaned_name,
                email=cleaned_email,
                created_at=self._clock(),
            )
            self._next_id += 1
            self._records.append(record)
            self._index[record.id] = record

        logger.info("Created resource %s", record.id)
        return record

    def get_by_id(self, identifier: object) -> Record:
        resource_id = parse_identifier(identifier)
        with self._lock:
            record = self._index.get(resource_id)
        if record is None:
            raise NotFoundError(resource_id)
        return record

    def list(self) -> Tuple[Record, ...]:
        with self._lock:
            return tuple(self._records)


__all__ = ["ResourceRegistry", "parse_identifier"]
