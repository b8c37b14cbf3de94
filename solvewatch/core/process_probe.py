"""Process-liveness query for the external solver.

Purely an enrichment input: every failure mode (no such process, access
denied, process exiting mid-query) produces ``None``, never stale data.
"""

from __future__ import annotations

import logging
import time

import psutil

from solvewatch.models.process import ProcessStats

logger = logging.getLogger(__name__)


def _matches(proc: psutil.Process, name: str) -> bool:
    info = proc.info
    if info.get("name") == name:
        return True
    cmdline = info.get("cmdline") or []
    return any(part.rsplit("/", 1)[-1] == name for part in cmdline[:2])


def find_solver_process(name: str) -> ProcessStats | None:
    """Return resource usage for the first process called *name*.

    Matches either the process name or the basename of the executable in
    its command line (covers interpreters launching a script).
    """
    for proc in psutil.process_iter(["pid", "name", "cmdline"]):
        try:
            if not _matches(proc, name):
                continue
            with proc.oneshot():
                memory = proc.memory_info()
                cpu = proc.cpu_times()
                created = proc.create_time()
            return ProcessStats(
                pid=proc.pid,
                name=name,
                uptime_seconds=max(0.0, time.time() - created),
                rss_bytes=memory.rss,
                cpu_user_seconds=cpu.user,
                cpu_system_seconds=cpu.system,
            )
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess) as exc:
            logger.debug("Skipping process %s: %s", proc.pid, exc)
            continue
    return None


def format_bytes(num_bytes: int) -> str:
    """Human-readable byte count, e.g. ``1.5 MB``."""
    if num_bytes <= 0:
        return "0 B"
    units = ("B", "KB", "MB", "GB")
    value = float(num_bytes)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{value:.1f} {units[i]}".replace(".0 ", " ")


def format_uptime(seconds: float) -> str:
    """Compact duration, e.g. ``2d 3h 4m 5s``."""
    total = int(seconds)
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, secs = divmod(rem, 60)
    if days:
        return f"{days}d {hours}h {minutes}m {secs}s"
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"
