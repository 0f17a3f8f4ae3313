"""Centralised settings for the storefront preview sanitizer.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36"
)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    previews_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("PREVIEWS_DIR", Path("public") / "previews")
        )
    )

    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    user_agent: str = field(
        default_factory=lambda: os.environ.get("PREVIEW_USER_AGENT", DEFAULT_USER_AGENT)
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )

    def preview_path(self, name: str) -> Path:
        """Path of the sanitized preview written for *name*."""
        return self.previews_dir / f"{name}.html"

    def ensure_previews_dir(self) -> None:
        """Create the previews directory if it does not exist."""
        self.previews_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton, import this everywhere:
#   from storefront.config import settings
settings = Settings()
