import pytest
from pydantic import ValidationError

from config import SimulatorSettings


def test_defaults():
    settings = SimulatorSettings(_env_file=None)
    assert settings.max_workers is None
    assert settings.shutdown_timeout == 60.0
    assert settings.time_scale == 0.001
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("NPUSIM_MAX_WORKERS", "3")
    monkeypatch.setenv("NPUSIM_SHUTDOWN_TIMEOUT", "2.5")
    monkeypatch.setenv("NPUSIM_JSON_LOGS", "true")
    settings = SimulatorSettings(_env_file=None)
    assert settings.max_workers == 3
    assert settings.shutdown_timeout == 2.5
    assert settings.json_logs is True


def test_rejects_zero_workers():
    with pytest.raises(ValidationError):
        SimulatorSettings(_env_file=None, max_workers=0)
