"""Transport-independent translation between requests and registry calls."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, model_validator

from .errors import InvalidIdentifierError, NotFoundError, RegistryError, ValidationError
from .registry import ResourceRegistry

logger = logging.getLogger("resource_registry.facade")

FAILURE_MESSAGE = "Request failed"


class Envelope(BaseModel):
    """Uniform response body returned for every request."""

    success: bool
    message: str
    data: Optional[Any] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_outcome(self):  # type: ignore[override]
        if self.success and self.error is not None:
            raise ValueError("Successful responses must not carry an error")
        if not self.success and self.data is not None:
            raise ValueError("Failed responses must not carry data")
        return self

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


@dataclass(frozen=True)
class FacadeResponse:
    status_code: int
    envelope: Envelope

    @property
    def payload(self) -> Dict[str, Any]:
        return self.envelope.to_payload()


def _success(status_code: int, message: str, data: Any) -> FacadeResponse:
    return FacadeResponse(status_code, Envelope(success=True, message=message, data=data))


def _failure(status_code: int, error: str) -> FacadeResponse:
    return FacadeResponse(
        status_code,
        Envelope(success=False, message=FAILURE_MESSAGE, error=error),
    )


class ResourceFacade:
    """Validate inbound data, call the registry, and wrap results in an :class:`Envelope`."""

    def __init__(self, registry: ResourceRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ResourceRegistry:
        return self._registry

    def list_resources(self) -> FacadeResponse:
        records = self._registry.list()
        return _success(
            200,
            f"Found {len(records)} resources",
            [record.to_dict() for record in records],
        )

    def create_resource(self, payload: object) -> FacadeResponse:
        if not isinstance(payload, Mapping):
            return self.malformed_body("Request body must be a JSON object")

        try:
            record = self._registry.create(payload.get("name"), payload.get("email"))
        except ValidationError as exc:
            return self._client_error(400, exc)

        return _success(201, "Resource created", record.to_dict())

    def get_resource(self, identifier: object) -> FacadeResponse:
        try:
            record = self._registry.get_by_id(identifier)
        except InvalidIdentifierError as exc:
            return self._client_error(400, exc)
        except NotFoundError as exc:
            return self._client_error(404, exc)

        return _success(200, "Resource found", record.to_dict())

    def method_not_allowed(self, method: str, path: str) -> FacadeResponse:
        logger.info("Rejected %s %s: method not allowed", method, path)
        return _failure(405, f"Method {method} not allowed on {path}")

    def malformed_body(self, detail: str) -> FacadeResponse:
        logger.info("Rejected malformed request body: %s", detail)
        return _failure(400, detail)

    def _client_error(self, status_code: int, exc: RegistryError) -> FacadeResponse:
        logger.info("Client error (%s): %s", status_code, exc)
        return _failure(status_code, str(exc))


__all__ = [
    "Envelope",
    "FAILURE_MESSAGE",
    "FacadeResponse",
    "ResourceFacade",
]
