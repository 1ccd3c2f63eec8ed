# leaderboards/config/settings.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv


DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./leaderboards.db"


def _to_int(value: str, key_name: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise RuntimeError(f"Invalid integer for {key_name}: {value!r}") from e


def _to_bool(value: str, key_name: str) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    raise RuntimeError(f"Invalid boolean for {key_name}: {value!r}")


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL

    # --- auto-cycle scheduler ---
    cycle_enabled: bool = True
    cycle_interval_minutes: int = 15

    # --- environment ---
    environment: str = "production"  # production | development

    @property
    def is_dev(self) -> bool:
        return self.environment.lower() in {"dev", "development", "local"}

    @classmethod
    def load(cls, env: Mapping[str, str] | None = None) -> "Settings":
        """
        Loads from process env (and .env if present).
        Pass `env` explicitly to skip the .env lookup.
        """
        if env is None:
            load_dotenv()
            env = os.environ

        database_url = (env.get("DATABASE_URL") or DEFAULT_DATABASE_URL).strip()

        cycle_enabled_raw = (env.get("CYCLE_ENABLED") or "").strip()
        cycle_enabled = _to_bool(cycle_enabled_raw, "CYCLE_ENABLED") if cycle_enabled_raw else True

        interval_raw = (env.get("CYCLE_INTERVAL_MINUTES") or "").strip()
        cycle_interval_minutes = _to_int(interval_raw, "CYCLE_INTERVAL_MINUTES") if interval_raw else 15
        if not 1 <= cycle_interval_minutes <= 59:
            raise RuntimeError(
                f"CYCLE_INTERVAL_MINUTES must be between 1 and 59, got {cycle_interval_minutes}"
            )

        environment = (env.get("ENVIRONMENT") or "production").strip() or "production"

        return cls(
            database_url=database_url,
            cycle_enabled=cycle_enabled,
            cycle_interval_minutes=cycle_interval_minutes,
            environment=environment,
        )
