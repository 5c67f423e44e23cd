"""Unit tests for the configuration manager."""

import pytest

from bookmark_tagger.lib.config_manager import ConfigManager, _coerce_type
from bookmark_tagger.lib.defaults import DEFAULTS, get_default, is_sensitive


@pytest.fixture
def clean_env(monkeypatch):
    """Remove tagger keys from the environment, restoring them afterwards."""
    for key in DEFAULTS:
        monkeypatch.setenv(key, "placeholder")
        monkeypatch.delenv(key)
    return monkeypatch


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,default,expected",
    [
        ("12.5", 30.0, 12.5),
        ("5", 2, 5),
        ("abc", 2, 2),
        ("nope", 1.5, 1.5),
        ("true", False, True),
        ("0", True, False),
        ("text", "default", "text"),
        ("anything", None, "anything"),
    ],
)
def test_coerce_type(value, default, expected):
    assert _coerce_type(value, default) == expected


@pytest.mark.unit
def test_defaults_when_unset(clean_env, temp_dir):
    manager = ConfigManager(env_path=temp_dir / ".env")

    assert manager.get("TAGGER_MODEL") == "anthropic:claude-3-5-haiku-latest"
    assert manager.get("TAGGER_REQUEST_TIMEOUT") == 30.0
    assert manager.get("UNKNOWN_KEY") is None
    assert manager.get("UNKNOWN_KEY", "fallback") == "fallback"


@pytest.mark.unit
def test_environment_coerced_to_default_type(clean_env, temp_dir):
    clean_env.setenv("TAGGER_REQUEST_TIMEOUT", "12.5")
    clean_env.setenv("TAGGER_MAX_RETRIES", "4")

    manager = ConfigManager(env_path=temp_dir / ".env")

    assert manager.get("TAGGER_REQUEST_TIMEOUT") == 12.5
    assert manager.get("TAGGER_MAX_RETRIES") == 4


@pytest.mark.unit
def test_dotenv_loaded_without_overriding_environment(clean_env, temp_dir):
    env_file = temp_dir / ".env"
    env_file.write_text(
        "TAGGER_MODEL=openai:gpt-4o-mini\nTAG_CORPUS_PATH=/tmp/corpus.json\n",
        encoding="utf-8",
    )
    clean_env.setenv("TAGGER_MODEL", "anthropic:from-env")

    manager = ConfigManager(env_path=env_file)

    assert manager.get("TAGGER_MODEL") == "anthropic:from-env"
    assert manager.get("TAG_CORPUS_PATH") == "/tmp/corpus.json"


@pytest.mark.unit
def test_get_all_masks_secrets(clean_env, temp_dir):
    clean_env.setenv("ANTHROPIC_API_KEY", "sk-secret")
    manager = ConfigManager(env_path=temp_dir / ".env")

    masked = manager.get_all()
    unmasked = manager.get_all(mask_sensitive=False)

    assert masked["ANTHROPIC_API_KEY"] == "***"
    assert masked["OPENAI_API_KEY"] == ""
    assert unmasked["ANTHROPIC_API_KEY"] == "sk-secret"
    assert set(masked) == set(DEFAULTS)


@pytest.mark.unit
def test_defaults_helpers():
    assert get_default("LOG_LEVEL") == "INFO"
    assert get_default("MISSING") is None
    assert is_sensitive("OPENAI_API_KEY")
    assert not is_sensitive("TAGGER_MODEL")
