import logging

from pathopt.config import Settings, configure_logging


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("PATHOPT_FLOAT_PRECISION", "5")
    monkeypatch.setenv("PATHOPT_LOG_LEVEL", "debug")
    settings = Settings()
    assert settings.pathopt_float_precision == 5
    assert settings.pathopt_log_level == "debug"


def test_configure_logging(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
    configure_logging("info")
    assert calls["level"] == logging.INFO
    configure_logging("nonsense")
    assert calls["level"] == logging.WARNING
