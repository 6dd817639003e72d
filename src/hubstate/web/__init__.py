"""HTTP transport for the hub engine."""

from hubstate.web.app import ENGINE_KEY, create_app

__all__ = ["ENGINE_KEY", "create_app"]
