import pytest
from pydantic import ValidationError

from app.config import ConfigurationError, Settings, get_settings


def test_defaults(monkeypatch):
    for name in ("PORT", "IMAGE_POLL_INTERVAL", "NFT_MINT_FUNCTION", "IS_MINTING_ACTIVE"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.port == 4000
    assert settings.image_max_attempts == 30
    assert settings.IMAGE_POLL_INTERVAL_S == 2.0
    assert settings.nft_mint_function == "safeMint"
    assert settings.mint_confirmation_timeout_s == 120
    assert settings.is_minting_active is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "5001")
    monkeypatch.setenv("IMAGE_POLL_INTERVAL", "250")
    monkeypatch.setenv("IS_MINTING_ACTIVE", "true")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")

    settings = get_settings()

    assert settings.port == 5001
    assert settings.IMAGE_POLL_INTERVAL_S == 0.25
    assert settings.is_minting_active is True
    assert settings.cors_origin_list() == ["http://a.test", "http://b.test"]


def test_api_token_alias(monkeypatch):
    monkeypatch.setenv("ON_DEMAND_API_ACCESS_TOKEN", "secret")
    assert get_settings().API_TOKEN == "secret"


def test_settings_are_frozen():
    settings = Settings(_env_file=None)
    with pytest.raises(ValidationError):
        settings.port = 1


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_configuration_error_message():
    err = ConfigurationError("WALLET_PATH")
    assert err.field == "WALLET_PATH"
    assert str(err) == "WALLET_PATH environment variable is not set"
