"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from performance_engine.dates import DEFAULT_TIMEZONE


@dataclass
class Settings:
    supabase_url: Optional[str]
    supabase_key: Optional[str]
    timezone: str = DEFAULT_TIMEZONE
    log_level: str = "INFO"

    def require_credentials(self) -> tuple[str, str]:
        """Return (url, key), raising when a live connection cannot be made."""

        missing = [
            name
            for name, value in (("SUPABASE_URL", self.supabase_url), ("SUPABASE_ANON_KEY", self.supabase_key))
            if not value
        ]
        if missing:
            raise ValueError(f"Missing Supabase settings {missing}")
        return self.supabase_url, self.supabase_key


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Load settings from the process environment, after reading a ``.env`` file if present."""

    load_dotenv(env_file)
    return Settings(
        supabase_url=os.getenv("SUPABASE_URL") or None,
        supabase_key=os.getenv("SUPABASE_ANON_KEY") or None,
        timezone=os.getenv("PERFORMANCE_TIMEZONE") or DEFAULT_TIMEZONE,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
