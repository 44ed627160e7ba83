import pytest
from pydantic import ValidationError

from organizer.utils.config import Settings


def test_defaults_match_fixed_behaviour(monkeypatch):
    for name in ("LOG_LEVEL", "MOVE_FOLDERS", "MAX_RETRIES", "RETRY_DELAY_MS", "MOVE_DELAY_MS"):
        monkeypatch.delenv(f"ORGANIZER_{name}", raising=False)

    settings = Settings(_env_file=None)

    assert settings.log_level == "INFO"
    assert settings.move_folders is True
    assert settings.max_retries == 3
    assert settings.retry_delay == pytest.approx(1.0)
    assert settings.move_delay == pytest.approx(0.5)


def test_log_level_is_case_insensitive(monkeypatch):
    monkeypatch.setenv("ORGANIZER_LOG_LEVEL", "debug")

    assert Settings(_env_file=None).log_level == "DEBUG"


def test_unknown_log_level_is_rejected(monkeypatch):
    monkeypatch.setenv("ORGANIZER_LOG_LEVEL", "loud")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
