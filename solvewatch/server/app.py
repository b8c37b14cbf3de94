"""HTTP front end: JSON snapshot, server-sent event stream and trends.

Routes
------
GET /api/health          liveness of this server
GET /api/snapshot        current snapshot as JSON (503 if none is valid)
GET /api/snapshotstream  server-sent events, one per accepted snapshot
GET /api/trends          sampled stats CSV
GET /api/process         solver process stats as JSON, or ``null``
GET /api/heatmap         heatmap summary and percentile matrix
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any
from urllib.parse import parse_qs, urlparse

from solvewatch.core.process_probe import find_solver_process
from solvewatch.core.trends import render_trend_csv, sample_trend_points
from solvewatch.monitor.session import MonitorSession
from solvewatch.routing.broadcaster import format_sse

logger = logging.getLogger(__name__)

# Seconds between SSE keep-alive comments while no snapshot changes.
KEEPALIVE_SECONDS = 15.0


class MonitorRequestHandler(BaseHTTPRequestHandler):
    """Request handler bound to a ``MonitorSession`` via ``build_server``."""

    session: MonitorSession
    server_version = "solvewatch"

    def do_GET(self) -> None:  # noqa: N802
        parsed = urlparse(self.path)
        route = parsed.path.rstrip("/")
        if route == "/api/health":
            self._send_json(
                {
                    "status": "OK",
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                    "watching": self.session.watcher.is_watching,
                }
            )
        elif route == "/api/snapshot":
            snapshot = self.session.watcher.last_valid_snapshot
            if snapshot is None:
                self._send_json({"error": "no valid snapshot"}, status=503)
            else:
                self._send_json(snapshot.to_wire())
        elif route == "/api/snapshotstream":
            self._serve_stream()
        elif route == "/api/trends":
            self._serve_trends(parse_qs(parsed.query))
        elif route == "/api/process":
            stats = find_solver_process(self.session.config.solver_process_name)
            self._send_json(stats.model_dump() if stats is not None else None)
        elif route == "/api/heatmap":
            heatmap = self.session.heatmap
            self._send_json(
                {
                    "stats": heatmap.get_stats().model_dump(by_alias=True),
                    "percentiles": heatmap.get_percentile_matrix(),
                }
            )
        else:
            self.send_error(404)

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A002
        logger.debug("%s - %s", self.address_string(), format % args)

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------

    def _send_json(self, payload: Any, status: int = 200) -> None:
        body = json.dumps(payload).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _serve_trends(self, query: dict[str, list[str]]) -> None:
        max_points = self.session.config.trend_max_points
        if "maxPoints" in query:
            try:
                max_points = max(1, int(query["maxPoints"][0]))
            except ValueError:
                self.send_error(400, "maxPoints must be an integer")
                return
        points = sample_trend_points(self.session.config.stats_path, max_points)
        body = render_trend_csv(points).encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", "text/csv; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _serve_stream(self) -> None:
        self.send_response(200)
        self.send_header("Content-Type", "text/event-stream")
        self.send_header("Cache-Control", "no-cache")
        self.send_header("Connection", "keep-alive")
        self.send_header("X-Accel-Buffering", "no")
        self.end_headers()

        broadcaster = self.session.broadcaster
        with broadcaster.listen() as listener:
            try:
                while not broadcaster.closed:
                    snapshot = listener.next(timeout=KEEPALIVE_SECONDS)
                    if snapshot is None:
                        self.wfile.write(b": keep-alive\n\n")
                    else:
                        self.wfile.write(format_sse(snapshot))
                    self.wfile.flush()
            except (BrokenPipeError, ConnectionResetError):
                logger.debug("Stream client %s disconnected", self.address_string())


def build_server(session: MonitorSession, host: str, port: int) -> ThreadingHTTPServer:
    """Create a threaded HTTP server whose handlers share *session*."""
    handler = type(
        "BoundMonitorRequestHandler",
        (MonitorRequestHandler,),
        {"session": session},
    )
    server = ThreadingHTTPServer((host, port), handler)
    server.daemon_threads = True
    return server


def serve(session: MonitorSession, host: str, port: int) -> None:
    """Start *session* and serve until interrupted."""
    session.start()
    server = build_server(session, host, port)
    logger.info("Server running on http://%s:%d", host, server.server_address[1])
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()
        session.stop()
