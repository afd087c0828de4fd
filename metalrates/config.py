"""Centralised settings for the metalrates engine.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

DEFAULT_TARGET_URL = "http://narnolicorporation.in"


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("METALRATES_WORKSPACE", Path.home() / ".metalrates")
        )
    )

    @property
    def cache_path(self) -> Path:
        """Absolute path to the JSON file holding the cached scrape result."""
        return self.workspace_dir / "rates_cache.json"

    # ------------------------------------------------------------------
    # Scraper
    # ------------------------------------------------------------------
    target_url: str = field(
        default_factory=lambda: os.environ.get("TARGET_URL", DEFAULT_TARGET_URL)
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "15.0"))
    )

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------
    cache_freshness_seconds: float = field(
        default_factory=lambda: float(os.environ.get("CACHE_FRESHNESS_SECONDS", "300"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )

    def ensure_workspace(self) -> None:
        """Create the workspace directory if it does not exist."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton; import this everywhere:
#   from metalrates.config import settings
settings = Settings()
