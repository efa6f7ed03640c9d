"""Command-line interface for the resource registry service."""

from __future__ import annotations
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Sequence

from resource_registry.config import ServiceConfig, load_service_config

logger = logging.getLogger("resource_registry.main")

_DEFAULT_SERVICE_URL = "http://localhost:8080"


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resource registry service utilities")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP registry service")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=None, help="Listen port (default: 8080)")
    serve_parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML configuration file (default: $REGISTRY_CONFIG)",
    )

    demo_parser = subparsers.add_parser(
        "demo", help="Exercise a running service with a short example session"
    )
    demo_parser.add_argument(
        "--service-url",
        default=None,
        help=f"Base URL of a running registry service (default: {_DEFAULT_SERVICE_URL})",
    )

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "demo"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            if any(flag in args_list for flag in ("-h", "--help")):
                return parser.parse_args(args_list)
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _resolve_config(args: argparse.Namespace) -> ServiceConfig:
    config_path = Path(args.config).expanduser() if args.config else None
    config = load_service_config(config_path)
    overrides = {}
    if args.host:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    return ServiceConfig.from_dict(overrides, base=config)


def _serve(config: ServiceConfig) -> None:
    from resource_registry.api import create_app
    import uvicorn

    logger.info("Starting resource registry on http://%s:%s", config.host, config.port)

    app = create_app(config=config)
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level,
        timeout_keep_alive=config.timeout_seconds,
    )


def _run_demo(service_url: str) -> int:
    """Walk through a create/list/fetch session against ``service_url``."""

    from resource_registry.client import ClientError, ResourceClient

    print(f"Using registry service at {service_url}\n")

    with ResourceClient(service_url) as client:
        try:
            health = client.health()
            print(f"Service status: {health.get('status')}")

            for name, email in (
                ("María García", "maria@ejemplo.com"),
                ("Carlos López", "carlos@ejemplo.com"),
            ):
                record = client.create_resource(name, email)
                print(f"Created #{record.id}: {record.name} <{record.email}>")

            records = client.list_resources()
            print(f"\n{len(records)} resources registered:")
            for record in records:
                print(f"  #{record.id:<4} {record.name:<24} {record.email}")

            first = client.get_resource(records[0].id)
            print(f"\nFetched #{first.id}: {first.name}")
        except ClientError as exc:
            print(f"Demo failed: {exc}")
            return 1

        missing_id = max((record.id for record in records), default=0) + 1
        try:
            client.get_resource(missing_id)
        except ClientError as exc:
            print(f"Fetching #{missing_id} failed as expected ({exc.status_code}): {exc}")
        else:
            print(f"Unexpectedly found resource #{missing_id}")
            return 1

    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for CLI usage."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    args = _parse_args(argv)

    if args.command == "serve":
        try:
            config = _resolve_config(args)
        except (OSError, ValueError) as exc:
            raise SystemExit(f"Invalid configuration: {exc}") from exc
        _serve(config)
    elif args.command == "demo":
        service_url = args.service_url or os.getenv("REGISTRY_SERVICE_URL") or _DEFAULT_SERVICE_URL
        raise SystemExit(_run_demo(service_url))


if __name__ == "__main__":
    main()
