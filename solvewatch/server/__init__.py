"""HTTP server exposing snapshots, the push stream, trends and process stats."""

from solvewatch.server.app import build_server, serve

__all__ = ["build_server", "serve"]
