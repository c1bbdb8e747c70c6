import pytest

from brickdesk.core.config import Settings


def test_dev_allows_local_api():
    settings = Settings(env="dev")
    assert settings.api_base_url.startswith("http://localhost")


def test_non_dev_rejects_local_api():
    with pytest.raises(ValueError):
        Settings(env="prod", api_base_url="http://127.0.0.1:5000")


def test_non_dev_accepts_remote_api():
    settings = Settings(env="prod", api_base_url="https://api.example.com")
    assert settings.allow_negative_totals is False
