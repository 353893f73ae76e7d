"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest

from barberbooking.config import AppConfig, BusinessHoursConfig


def test_defaults():
    config = AppConfig()

    assert config.shop_name == "Distrito Barbearia"
    assert config.business_hours.end_minutes - config.business_hours.start_minutes == 540
    assert config.smtp.is_configured() is False


def test_load_from_yaml(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "shop_name: Barbearia Centro\n"
        "log_level: debug\n"
        "business_hours:\n"
        "  start_minutes: 480\n"
        "  end_minutes: 1200\n"
        "smtp:\n"
        "  port: 587\n",
        encoding="utf-8",
    )

    config = AppConfig.load_from_yaml(config_path)

    assert config.shop_name == "Barbearia Centro"
    assert config.log_level == "DEBUG"
    assert config.business_hours.start_minutes == 480
    assert config.business_hours.buffer_minutes == 15
    assert config.smtp.port == 587


def test_example_config_is_valid():
    example = Path(__file__).resolve().parent.parent / "config.example.yaml"

    assert AppConfig.load_from_yaml(example).store.database == "distrito-barbearia"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        AppConfig.load_from_yaml(tmp_path / "missing.yaml")


def test_non_mapping_root(tmp_path):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError, match="mapping"):
        AppConfig.load_from_yaml(config_path)


def test_closing_before_opening_is_rejected():
    with pytest.raises(ValueError, match="end_minutes"):
        BusinessHoursConfig(start_minutes=1080, end_minutes=540)


def test_negative_buffer_is_rejected():
    with pytest.raises(ValueError):
        BusinessHoursConfig(buffer_minutes=-5)


def test_env_overrides():
    config = AppConfig().with_env_overrides({
        "MONGODB_URI": "mongodb://db:27017",
        "GMAIL_USER": "shop@gmail.com",
        "GMAIL_APP_PASSWORD": "secret",
    })

    assert config.store.uri == "mongodb://db:27017"
    assert config.smtp.is_configured()
    assert config.smtp.get_sender() == "shop@gmail.com"


def test_env_overrides_leave_unset_values():
    config = AppConfig().with_env_overrides({})

    assert config.store.uri == "mongodb://localhost:27017"
    assert config.smtp.username == ""
