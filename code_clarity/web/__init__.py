"""Live-reload watch server."""

from code_clarity.web.app import create_app
from code_clarity.web.state import GraphBroker, GraphSnapshot, WatchSession

__all__ = ["GraphBroker", "GraphSnapshot", "WatchSession", "create_app"]
