"""Runtime settings for SnipeRank.

Values come from environment variables, with a `.env` file in the project root
loaded on import.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from sniperank.engine.fetcher import USER_AGENT
from sniperank.engine.models import ReportMode
from sniperank.engine.scoring import QualityScore, build_override_table

_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    # crawl limits per report mode
    short_max_pages: int = field(
        default_factory=lambda: int(os.environ.get("SNIPERANK_SHORT_MAX_PAGES", "8"))
    )
    long_max_pages: int = field(
        default_factory=lambda: int(os.environ.get("SNIPERANK_LONG_MAX_PAGES", "15"))
    )
    max_depth: int = field(
        default_factory=lambda: int(os.environ.get("SNIPERANK_MAX_DEPTH", "3"))
    )
    short_timeout: float = field(
        default_factory=lambda: float(os.environ.get("SNIPERANK_SHORT_TIMEOUT", "5.0"))
    )
    long_timeout: float = field(
        default_factory=lambda: float(os.environ.get("SNIPERANK_LONG_TIMEOUT", "10.0"))
    )

    # fetching
    user_agent: str = field(
        default_factory=lambda: os.environ.get("SNIPERANK_USER_AGENT", USER_AGENT)
    )
    fetcher: str = field(
        default_factory=lambda: os.environ.get("SNIPERANK_FETCHER", "httpx").strip().lower()
    )

    # hosts that always receive the fixed reference score
    override_hosts: list[str] = field(
        default_factory=lambda: _csv(
            os.environ.get("SNIPERANK_OVERRIDE_HOSTS", "yoramezra.com,quontora.com")
        )
    )

    log_level: str = field(
        default_factory=lambda: os.environ.get("SNIPERANK_LOG_LEVEL", "INFO").upper()
    )
    api_token: str = field(
        default_factory=lambda: os.environ.get("API_TOKEN", "").strip()
    )

    def max_pages_for(self, mode: ReportMode) -> int:
        return self.long_max_pages if mode == "long" else self.short_max_pages

    def timeout_for(self, mode: ReportMode) -> float:
        return self.long_timeout if mode == "long" else self.short_timeout

    def overrides(self) -> dict[str, QualityScore]:
        return build_override_table(self.override_hosts)


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=(level or settings.log_level), format=LOG_FORMAT)


settings = Settings()
