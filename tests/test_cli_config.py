"""Tests for CLI configuration module"""

import json

import pytest

from llmx.cli.config import (
    CONFIG_TEMPLATE,
    Profile,
    default_config_path,
    ensure_config_file,
    load_profile,
    read_profile_file,
)
from llmx.types.errors import ConfigError


@pytest.fixture
def config_file(tmp_path):
    """Write a config file with two profiles and return its path."""
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "default_profile": "work",
                "profiles": {
                    "work": {"provider": "anthropic", "model": "claude-3-5-haiku-latest"},
                    "local": {
                        "provider": "compat",
                        "base_url": "http://localhost:11434/v1",
                        "max_tokens": 512,
                        "error_key": "error",
                    },
                },
            }
        )
    )
    return path


def test_missing_file_gives_empty_profile(tmp_path):
    """Test that a missing config file is not an error"""
    assert load_profile(tmp_path / "nope.json") == Profile()


def test_default_profile_selected(config_file):
    """Test that default_profile is used when no name is given"""
    profile = load_profile(config_file)
    assert profile.provider == "anthropic"
    assert profile.model == "claude-3-5-haiku-latest"
    assert profile.base_url is None


def test_explicit_profile_wins(config_file):
    """Test that an explicit name overrides default_profile"""
    profile = load_profile(config_file, "local")
    assert profile.provider == "compat"
    assert profile.max_tokens == 512
    assert profile.error_key == "error"


def test_explicit_profile_missing(config_file):
    """Test that a named profile must exist"""
    with pytest.raises(ConfigError, match="profile not found: 'ghost'"):
        load_profile(config_file, "ghost")


def test_dangling_default_profile(tmp_path):
    """Test that a default_profile without a matching entry is ignored"""
    path = tmp_path / "config.json"
    path.write_text('{"default_profile": "gone", "profiles": {}}')
    assert load_profile(path) == Profile()


def test_no_default_profile(tmp_path):
    """Test the freshly created template"""
    path = tmp_path / "config.json"
    path.write_text(CONFIG_TEMPLATE)
    assert load_profile(path) == Profile()


def test_invalid_json(tmp_path):
    """Test that malformed JSON is reported"""
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError, match="invalid JSON"):
        load_profile(path)


def test_invalid_schema(tmp_path):
    """Test that wrong value types are reported"""
    path = tmp_path / "config.json"
    path.write_text('{"profiles": {"bad": {"max_tokens": "lots"}}}')
    with pytest.raises(ConfigError, match="invalid config file"):
        read_profile_file(path)


def test_ensure_config_file_creates_template(tmp_path):
    """Test that the template is written once, including parent dirs"""
    path = tmp_path / "nested" / "llmx" / "config.json"
    assert ensure_config_file(path) is True
    assert json.loads(path.read_text()) == {"default_profile": "", "profiles": {}}

    path.write_text('{"default_profile": "keep", "profiles": {}}')
    assert ensure_config_file(path) is False
    assert "keep" in path.read_text()


def test_default_config_path():
    """Test that the default path ends in llmx/config.json"""
    path = default_config_path()
    assert path.name == "config.json"
    assert path.parent.name.lower() == "llmx"
