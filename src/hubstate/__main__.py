"""Run the hub HTTP server.

Usage
-----
::

    python -m hubstate --port 3001

Every option falls back to the matching ``HUB_*`` environment variable
(see :class:`hubstate.config.HubConfig`).
"""

from __future__ import annotations

import argparse
import logging
from typing import Any

from aiohttp import web

from hubstate.config import HubConfig
from hubstate.web import create_app

_logger = logging.getLogger("hubstate")

_ENDPOINTS: tuple[tuple[str, str, str], ...] = (
    ("GET", "/health", "Health check"),
    ("GET", "/hub/state/:userId", "Get hub state for user"),
    ("POST", "/hub/state", "Update hub state"),
    ("POST", "/hub/reset", "Reset user's hub state"),
    ("GET", "/hub/users", "List all users (debug)"),
    ("GET", "/hub/history/all", "Get ALL users history"),
    ("GET", "/hub/history/:userId", "Get voice history"),
    ("DELETE", "/hub/history/:userId", "Delete all history"),
    ("DELETE", "/hub/history/:userId/:id", "Delete single entry"),
    ("POST", "/hub/history/toggle/:userId", "Enable/disable history"),
)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="hubstate", description="Everyday Tasks Hub backend server")
    parser.add_argument("--host", help="Interface to bind (default: HUB_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port to listen on (default: HUB_PORT/PORT or 3001)")
    parser.add_argument("--log-level", help="Log level (default: HUB_LOG_LEVEL or INFO)")
    return parser.parse_args(argv)


def _banner(config: HubConfig) -> None:
    _logger.info("=" * 60)
    _logger.info("  Everyday Tasks Hub - Backend Server")
    _logger.info("  Server running on http://%s:%d", config.host, config.port)
    for method, path, description in _ENDPOINTS:
        _logger.info("    %-6s %-28s - %s", method, path, description)
    _logger.info("=" * 60)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    overrides: dict[str, Any] = {
        key: value
        for key, value in (("host", args.host), ("port", args.port), ("log_level", args.log_level))
        if value is not None
    }
    config = HubConfig.from_env(**overrides)

    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _banner(config)
    web.run_app(create_app(config=config), host=config.host, port=config.port, print=None)


if __name__ == "__main__":
    main()
