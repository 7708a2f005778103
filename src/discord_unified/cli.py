"""Command line entry point: ``discord-unified``."""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from typing import Any

from discord_unified.backend import bind_backend
from discord_unified.config import TRANSPORTS, ServerConfig
from discord_unified.server import create_discord_server

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="discord-unified",
        description="Serve Discord operations over MCP through four generic tools",
    )
    parser.add_argument("--backend", help="Backend factory as 'package.module:attribute'")
    parser.add_argument("--transport", choices=TRANSPORTS, help="MCP transport")
    parser.add_argument("--host", help="Bind address for network transports")
    parser.add_argument("--port", type=int, help="Port for network transports")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, ...)")
    parser.add_argument(
        "--strict-backend",
        action="store_true",
        default=None,
        help="Refuse to start unless the backend implements every operation",
    )
    return parser


def load_backend(spec: str) -> Any:
    """Import ``module:attribute`` and call it if it is callable."""
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Backend must look like 'package.module:attribute', got {spec!r}")
    module = importlib.import_module(module_name)
    target: Any = module
    for part in attr.split("."):
        target = getattr(target, part)
    return target() if callable(target) else target


def resolve_config(args: argparse.Namespace, base: ServerConfig | None = None) -> ServerConfig:
    """Overlay command line arguments on the environment config."""
    config = base if base is not None else ServerConfig.from_env()
    if args.backend:
        config.backend = args.backend
    if args.transport:
        config.transport = args.transport
    if args.host:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.log_level:
        config.log_level = args.log_level
    if args.strict_backend is not None:
        config.strict_backend = args.strict_backend
    config.validate()
    return config


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config(args)
    except ValueError as exc:
        parser.error(str(exc))

    # stdout carries the stdio transport
    logging.basicConfig(
        level=config.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not config.backend:
        print(
            "error: no backend configured (use --backend or DISCORD_MCP_BACKEND)",
            file=sys.stderr,
        )
        return 2

    try:
        backend = bind_backend(load_backend(config.backend), strict=config.strict_backend)
    except (ImportError, AttributeError, ValueError) as exc:
        print(f"error: cannot load backend {config.backend!r}: {exc}", file=sys.stderr)
        return 2

    server = create_discord_server(
        backend,
        name=config.name,
        host=config.host,
        port=config.port,
    )
    logger.info("Starting %s over %s", config.name, config.transport)
    server.run(transport=config.transport)
    return 0
