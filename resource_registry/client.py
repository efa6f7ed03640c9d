"""HTTP client for talking to a running resource registry service."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from .models import Record


class ClientError(RuntimeError):
    """Raised when the service rejects a request or cannot be reached."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _normalize_base_url(base_url: str) -> str:
    cleaned = (base_url or "").strip()
    if not cleaned:
        raise ValueError("Service base URL must not be empty")
    return cleaned.rstrip("/")


def _extract_error_message(payload: object, default: str) -> str:
    if isinstance(payload, dict):
        for key in ("error", "message", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return default


class ResourceClient:
    """Call the registry endpoints and unwrap their response envelopes."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._base_url = _normalize_base_url(base_url)
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout)

    def __enter__(self) -> "ResourceClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health")

    def service_info(self) -> Dict[str, Any]:
        return self._request("GET", "/")

    def list_resources(self) -> List[Record]:
        data = self._request("GET", "/resources")
        if not isinstance(data, list):
            raise ClientError("Service returned an unexpected resource listing")
        return [self._to_record(item) for item in data]

    def create_resource(self, name: str, email: str) -> Record:
        data = self._request("POST", "/resources", json={"name": name, "email": email})
        return self._to_record(data)

    def get_resource(self, resource_id: int | str) -> Record:
        data = self._request("GET", f"/resources/{resource_id}")
        return self._to_record(data)

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.RequestError as exc:
            raise ClientError(f"Failed to contact registry service: {exc}") from exc

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.status_code >= 400 or not isinstance(payload, dict) or not payload.get("success"):
            default = f"Registry request failed with status {response.status_code}"
            raise ClientError(
                _extract_error_message(payload, default),
                status_code=response.status_code,
            )

        return payload.get("data")

    @staticmethod
    def _to_record(data: object) -> Record:
        if not isinstance(data, dict):
            raise ClientError("Service returned an unexpected resource payload")
        try:
            return Record.from_dict(data)
        except (TypeError, ValueError) as exc:
            raise ClientError("Service response was missing required fields") from exc


__all__ = ["ClientError", "ResourceClient"]
