"""Domain models for the in-memory resource registry."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Mapping


@dataclass(frozen=True)
class Record:
    """A stored entity whose identifier is assigned by the registry."""

    id: int
    name: str
    email: str
    created_at: datetime

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "createdAt": self.created_at.isoformat(),
        }

    @staticmethod
    def from_dict(data: Mapping[str, object]) -> "Record":
        """Rebuild a :class:`Record` from its serialized form."""
        required_fields = {"id", "name", "email", "createdAt"}
        missing = required_fields - data.keys()
        if missing:
            raise ValueError(f"Missing required record fields: {', '.join(sorted(missing))}")

        return Record(
            id=int(data["id"]),  # type: ignore[arg-type]
            name=str(data["name"]),
            email=str(data["email"]),
            created_at=datetime.fromisoformat(str(data["createdAt"])),
        )


__all__ = ["Record"]
