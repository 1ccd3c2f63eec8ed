from __future__ import annotations

import pytest

from leaderboards.config.settings import DEFAULT_DATABASE_URL, Settings


def test_defaults_when_env_is_empty():
    s = Settings.load({})

    assert s.database_url == DEFAULT_DATABASE_URL
    assert s.cycle_enabled is True
    assert s.cycle_interval_minutes == 15
    assert s.environment == "production"
    assert not s.is_dev


def test_values_are_read_and_trimmed():
    s = Settings.load(
        {
            "DATABASE_URL": " postgresql+asyncpg://lb@db/lb ",
            "CYCLE_ENABLED": "off",
            "CYCLE_INTERVAL_MINUTES": "5",
            "ENVIRONMENT": "development",
        }
    )

    assert s.database_url == "postgresql+asyncpg://lb@db/lb"
    assert s.cycle_enabled is False
    assert s.cycle_interval_minutes == 5
    assert s.is_dev


@pytest.mark.parametrize(
    ("env", "key"),
    [
        ({"CYCLE_INTERVAL_MINUTES": "soon"}, "CYCLE_INTERVAL_MINUTES"),
        ({"CYCLE_INTERVAL_MINUTES": "0"}, "CYCLE_INTERVAL_MINUTES"),
        ({"CYCLE_INTERVAL_MINUTES": "90"}, "CYCLE_INTERVAL_MINUTES"),
        ({"CYCLE_ENABLED": "maybe"}, "CYCLE_ENABLED"),
    ],
)
def test_invalid_values_fail_fast(env, key):
    with pytest.raises(RuntimeError, match=key):
        Settings.load(env)
