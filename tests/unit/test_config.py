"""Configuration loading tests."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from microtask_ledger_service.config import Settings, clear_settings_cache, get_settings
from tests.helpers import write_config


@pytest.mark.unit
def test_config_loads_from_yaml(tmp_path, monkeypatch):
    """Config loads correctly from a valid YAML file."""
    config_path = write_config(tmp_path, db_path="data/ledger.db")
    monkeypatch.setenv("CONFIG_PATH", str(config_path))

    settings = get_settings()

    assert isinstance(settings, Settings)
    assert settings.service.name == "microtask-ledger"
    assert settings.server.port == 8010
    assert settings.database.path == "data/ledger.db"
    assert settings.database.busy_timeout_ms == 5000
    assert settings.request.max_body_size == 1048576
    assert settings.registration.worker_initial_coins == 10
    assert settings.registration.buyer_initial_coins == 50
    assert settings.registration.admin_initial_coins == 0


@pytest.mark.unit
def test_config_is_cached_until_cleared(tmp_path, monkeypatch):
    """get_settings() returns the same object until the cache is cleared."""
    monkeypatch.setenv("CONFIG_PATH", str(write_config(tmp_path)))

    first = get_settings()
    assert get_settings() is first

    clear_settings_cache()
    assert get_settings() is not first


@pytest.mark.unit
def test_config_rejects_extra_fields(tmp_path, monkeypatch):
    """Config with extra fields causes validation error."""
    config_path = write_config(tmp_path)
    config_path.write_text(config_path.read_text() + "unexpected:\n  key: 1\n")
    monkeypatch.setenv("CONFIG_PATH", str(config_path))

    with pytest.raises(ValidationError):
        get_settings()


@pytest.mark.unit
def test_config_requires_registration_section(tmp_path, monkeypatch):
    """There are no defaults; a missing section fails startup."""
    config_path = write_config(tmp_path)
    content = config_path.read_text()
    config_path.write_text(content.split("registration:")[0])
    monkeypatch.setenv("CONFIG_PATH", str(config_path))

    with pytest.raises(ValidationError):
        get_settings()


@pytest.mark.unit
def test_config_rejects_non_mapping_file(tmp_path, monkeypatch):
    """A YAML file that is not a mapping is refused."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text("- just\n- a list\n")
    monkeypatch.setenv("CONFIG_PATH", str(config_path))

    with pytest.raises(ValueError, match="Invalid config file"):
        get_settings()
