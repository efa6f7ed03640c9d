"""End-to-end tests for the registry HTTP API."""

from __future__ import annotations

import sys
import unittest
from typing import Tuple

from fastapi.testclient import TestClient

from resource_registry.api import create_app
from resource_registry.config import ServiceConfig
from resource_registry.models import Record
from resource_registry.registry import ResourceRegistry


class _BrokenRegistry(ResourceRegistry):
    def list(self) -> Tuple[Record, ...]:
        raise RuntimeError("storage exploded")


class ResourceAPITests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = ResourceRegistry()
        self.app = create_app(registry=self.registry)
        self.client = TestClient(self.app)

    def tearDown(self) -> None:
        self.client.close()

    def test_resource_lifecycle(self) -> None:
        created = self.client.post(
            "/resources",
            json={"name": "María García", "email": "maria@ejemplo.com"},
        )
        self.assertEqual(created.status_code, 201, created.text)
        body = created.json()
        self.assertTrue(body["success"])
        self.assertNotIn("error", body)
        self.assertEqual(body["data"]["id"], 1)
        self.assertEqual(body["data"]["name"], "María García")

        second = self.client.post(
            "/resources",
            json={"name": "Carlos López", "email": "carlos@ejemplo.com"},
        )
        self.assertEqual(second.json()["data"]["id"], 2)

        listing = self.client.get("/resources")
        self.assertEqual(listing.status_code, 200)
        self.assertEqual([item["id"] for item in listing.json()["data"]], [1, 2])

        fetched = self.client.get("/resources/1")
        self.assertEqual(fetched.status_code, 200)
        self.assertEqual(fetched.json()["data"], body["data"])

        missing = self.client.get("/resources/3")
        self.assertEqual(missing.status_code, 404)
        missing_body = missing.json()
        self.assertFalse(missing_body["success"])
        self.assertNotIn("data", missing_body)
        self.assertIn("not found", missing_body["error"])

    def test_missing_field_is_bad_request(self) -> None:
        response = self.client.post("/resources", json={"name": "Solo"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("email", response.json()["error"])
        self.assertEqual(len(self.registry), 0)

    def test_malformed_json_is_bad_request(self) -> None:
        response = self.client.post(
            "/resources",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("not valid JSON", response.json()["error"])

        empty = self.client.post("/resources", content=b"")
        self.assertEqual(empty.status_code, 400)

        array = self.client.post("/resources", json=["name", "email"])
        self.assertEqual(array.status_code, 400)
        self.assertEqual(array.json()["error"], "Request body must be a JSON object")

    def test_malformed_identifier_is_bad_request(self) -> None:
        for identifier in ("abc", "0", "-1", "1.5"):
            response = self.client.get(f"/resources/{identifier}")
            self.assertEqual(response.status_code, 400, identifier)
            self.assertFalse(response.json()["success"])

    def test_non_ascii_digits_are_bad_request(self) -> None:
        self.client.post("/resources", json={"name": "Ada", "email": "ada@example.com"})

        response = self.client.get("/resources/\u0661")
        self.assertEqual(response.status_code, 400)
        self.assertNotIn("data", response.json())

    def test_oversized_identifier_is_client_error(self) -> None:
        self.client.post("/resources", json={"name": "Ada", "email": "ada@example.com"})

        response = self.client.get("/resources/" + "9" * 5000)
        self.assertIn(response.status_code, (400, 404))
        self.assertFalse(response.json()["success"])

    @unittest.skipUnless(
        hasattr(sys, "get_int_max_str_digits"),
        "integer string conversion limit not enforced by this interpreter",
    )
    def test_oversized_number_in_body_is_bad_request(self) -> None:
        body = b'{"name": "A", "email": "a@b.c", "x": ' + b"9" * 5000 + b"}"
        response = self.client.post(
            "/resources",
            content=body,
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("not valid JSON", response.json()["error"])
        self.assertEqual(len(self.registry), 0)

    def test_deeply_nested_body_is_bad_request(self) -> None:
        depth = 100_000
        body = b"[" * depth + b"]" * depth
        response = self.client.post(
            "/resources",
            content=body,
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["success"])

    def test_unsupported_methods_are_rejected(self) -> None:
        collection = self.client.delete("/resources")
        self.assertEqual(collection.status_code, 405)
        self.assertFalse(collection.json()["success"])
        allow = collection.headers.get("allow", "")
        self.assertIn("GET", allow)
        self.assertIn("POST", allow)

        item = self.client.put("/resources/1", json={"name": "x", "email": "y"})
        self.assertEqual(item.status_code, 405)
        self.assertIn("PUT", item.json()["error"])

    def test_unknown_route_uses_envelope(self) -> None:
        response = self.client.get("/does-not-exist")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["success"], False)

    def test_service_info_and_health(self) -> None:
        info = self.client.get("/")
        self.assertEqual(info.status_code, 200)
        self.assertIn("/resources", info.json()["data"]["endpoints"])

        self.client.post("/resources", json={"name": "Ada", "email": "ada@example.com"})
        health = self.client.get("/health")
        self.assertEqual(health.status_code, 200)
        data = health.json()["data"]
        self.assertEqual(data["status"], "ok")
        self.assertEqual(data["resources"], 1)

    def test_cors_preflight(self) -> None:
        response = self.client.options(
            "/resources",
            headers={
                "Origin": "https://example.com",
                "Access-Control-Request-Method": "POST",
            },
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers.get("access-control-allow-origin"), "*")

    def test_cors_origins_follow_configuration(self) -> None:
        app = create_app(config=ServiceConfig(cors_origins=("https://allowed.example",)))
        with TestClient(app) as client:
            allowed = client.get("/resources", headers={"Origin": "https://allowed.example"})
            self.assertEqual(
                allowed.headers.get("access-control-allow-origin"),
                "https://allowed.example",
            )
            denied = client.get("/resources", headers={"Origin": "https://other.example"})
            self.assertIsNone(denied.headers.get("access-control-allow-origin"))

    def test_unexpected_errors_do_not_leak_details(self) -> None:
        app = create_app(registry=_BrokenRegistry())
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/resources")

        self.assertEqual(response.status_code, 500)
        body = response.json()
        self.assertEqual(body["error"], "Internal server error")
        self.assertNotIn("exploded", response.text)

    def test_apps_do_not_share_state(self) -> None:
        self.client.post("/resources", json={"name": "Ada", "email": "ada@example.com"})

        with TestClient(create_app()) as other:
            self.assertEqual(other.get("/resources").json()["data"], [])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
