"""Solver process liveness record."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class ProcessStats(BaseModel):
    """Point-in-time resource usage of the external solver process."""

    model_config = ConfigDict(frozen=True)

    pid: int
    name: str
    uptime_seconds: float
    rss_bytes: int
    cpu_user_seconds: float
    cpu_system_seconds: float
