"""Server configuration read from the environment.

A ``.env`` file in the working directory is loaded first (existing
environment variables win), then :meth:`ServerConfig.from_env` reads the
``MCP_*`` and ``DISCORD_MCP_*`` variables.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from dotenv import load_dotenv

TRANSPORTS = ("stdio", "sse", "streamable-http")

_TRUE = frozenset({"1", "true", "yes", "on"})


def _parse_port(value: str | int) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid port: {value!r}") from None
    if not 0 < port < 65536:
        raise ValueError(f"Port out of range: {port}")
    return port


@dataclass
class ServerConfig:
    """Settings for the MCP server process."""

    name: str = "discord-unified"
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 3000
    backend: str | None = None
    strict_backend: bool = False
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.transport not in TRANSPORTS:
            raise ValueError(
                f"Unknown transport {self.transport!r}. Valid transports: {', '.join(TRANSPORTS)}"
            )
        self.port = _parse_port(self.port)
        self.log_level = self.log_level.upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level: {self.log_level!r}")

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        dotenv: bool = True,
    ) -> ServerConfig:
        """Build a config from *environ* (defaults to ``os.environ``)."""
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        return cls(
            name=environ.get("DISCORD_MCP_NAME", cls.name),
            transport=environ.get("MCP_TRANSPORT", cls.transport).strip().lower(),
            host=environ.get("MCP_HOST", cls.host),
            port=_parse_port(environ.get("MCP_PORT", cls.port)),
            backend=environ.get("DISCORD_MCP_BACKEND") or None,
            strict_backend=environ.get("DISCORD_MCP_STRICT_BACKEND", "").strip().lower() in _TRUE,
            log_level=environ.get("DISCORD_MCP_LOG_LEVEL", cls.log_level),
        )
