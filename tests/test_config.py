from datetime import date

import pytest

from config import get_settings_module, parse_holidays, parse_weekend_days


@pytest.mark.parametrize(
    "env, module",
    [
        ("production", "config.production"),
        ("PROD", "config.production"),
        ("testing", "config.testing"),
        ("development", "config.development"),
        ("staging", "config.development"),
    ],
)
def test_settings_module_follows_app_env(monkeypatch, env, module):
    monkeypatch.setenv("APP_ENV", env)
    assert get_settings_module() == module


def test_settings_module_defaults_to_development(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    assert get_settings_module() == "config.development"


def test_parse_weekend_days():
    assert parse_weekend_days("5,6") == (5, 6)
    assert parse_weekend_days(" 4 , ") == (4,)
    assert parse_weekend_days("") == ()


def test_parse_holidays():
    assert parse_holidays("2026-01-26, 2026-08-15") == (date(2026, 1, 26), date(2026, 8, 15))
    assert parse_holidays("") == ()
