"""Runtime configuration: env-driven.

Centralized config using pydantic-settings for environment variable
support. Reads from a .env file and SOLVEWATCH_* environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class WatchConfig(BaseSettings):
    """Monitor configuration with environment variable overrides.

    All settings can be overridden via SOLVEWATCH_* environment variables
    or a .env file in the working directory.

    Examples
    --------
    Override via environment::

        export SOLVEWATCH_LOG_DIR=/data/saves/2023.09.30-13.40.25
        export SOLVEWATCH_LOG_LEVEL=DEBUG
        export SOLVEWATCH_USE_POLLING=true

    Or via .env file::

        SOLVEWATCH_LOG_DIR=saves/latest
        SOLVEWATCH_PORT=3001
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SOLVEWATCH_",
        env_file_encoding="utf-8",
    )

    # Logging
    log_level: str = "INFO"

    # Solver output directory and the files inside it
    log_dir: Path = Path("saves")
    snapshot_file: str = "snapshot-treequence.txt"
    stats_file: str = "stats-treequence.csv"

    # Solver process lookup
    solver_process_name: str = "solve_file"

    # File observation
    use_polling: bool = False
    poll_interval_seconds: float = 1.0

    # Trends
    trend_max_points: int = 1000

    # HTTP server
    host: str = "127.0.0.1"
    port: int = 3001

    # Terminal monitor
    refresh_hz: float = 2.0

    @property
    def snapshot_path(self) -> Path:
        """Full path of the snapshot file the solver rewrites."""
        return self.log_dir / self.snapshot_file

    @property
    def stats_path(self) -> Path:
        """Full path of the append-only stats CSV."""
        return self.log_dir / self.stats_file


# Module-level singleton: import as `from solvewatch.config import config`
config = WatchConfig()
