import dataclasses

import pytest

from config import Settings, load_settings


def test_defaults():
    settings = load_settings()
    assert settings.storage_key == "transactions"
    assert settings.s3_bucket is None
    assert settings.database_url is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TRACKER_STORAGE_KEY", "household")
    monkeypatch.setenv("S3_BUCKET", "my-bucket")
    monkeypatch.setenv("TRACKER_CURRENCY_SYMBOL", "€")

    settings = load_settings()

    assert settings.storage_key == "household"
    assert settings.s3_bucket == "my-bucket"
    assert settings.currency_symbol == "€"


def test_empty_values_mean_unset(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "")
    assert load_settings().database_url is None


def test_settings_are_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        Settings().storage_key = "x"
