"""Profile configuration for the llmx CLI.

Profiles live in a single JSON file (by default under the per-user app
directory reported by click) and hold defaults that sit between explicit
command-line flags and built-in provider defaults.

Example config.json:
    {
      "default_profile": "work",
      "profiles": {
        "work": {"provider": "anthropic", "model": "claude-3-5-haiku-latest"},
        "local": {"provider": "compat", "base_url": "http://localhost:11434/v1"}
      }
    }
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

import click
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from llmx.types.errors import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "llmx"
CONFIG_FILENAME = "config.json"
CONFIG_TEMPLATE = '{\n  "default_profile": "",\n  "profiles": {}\n}\n'


class Profile(BaseModel):
    """Named set of invocation defaults. Unset fields fall through."""

    model_config = ConfigDict(frozen=True)

    provider: Optional[str] = None
    base_url: Optional[str] = None
    model: Optional[str] = None
    max_tokens: Optional[int] = Field(default=None, ge=0)
    instructions: Optional[str] = None
    verbosity: Optional[str] = None
    reasoning_effort: Optional[str] = None
    format: Optional[str] = None
    only: Optional[str] = None
    error_key: Optional[str] = None
    timeout: Optional[float] = Field(default=None, gt=0)


class ProfileFile(BaseModel):
    """On-disk layout of config.json"""

    default_profile: str = ""
    profiles: Dict[str, Profile] = Field(default_factory=dict)


def default_config_path() -> Path:
    """Return the per-user config file path (e.g. ~/.config/llmx/config.json)."""
    return Path(click.get_app_dir(APP_NAME)) / CONFIG_FILENAME


def read_profile_file(path: Path) -> ProfileFile:
    """Read and validate a config file.

    Args:
        path: Config file location

    Returns:
        Parsed file; an empty ProfileFile if the path does not exist

    Raises:
        ConfigError: If the file cannot be read or is not valid config JSON
    """
    if not path.exists():
        logger.debug(f"No config file at {path}")
        return ProfileFile()

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to read config file {path}: {e}") from e

    try:
        return ProfileFile.model_validate(json.loads(raw))
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON in config file {path}: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"invalid config file {path}: {e}") from e


def load_profile(path: Path, name: Optional[str] = None) -> Profile:
    """Select one profile from the config file.

    The explicitly requested name wins over the file's default_profile.

    Args:
        path: Config file location
        name: Profile name requested on the command line, if any

    Returns:
        Selected profile, or an empty Profile when nothing is selected

    Raises:
        ConfigError: If the file is invalid or the requested profile is missing
    """
    config = read_profile_file(path)
    selected = name or config.default_profile
    if not selected:
        return Profile()

    profile = config.profiles.get(selected)
    if profile is None:
        if name:
            raise ConfigError(f"profile not found: {name!r} (in {path})")
        logger.warning(f"default_profile {selected!r} not found in {path}, ignoring")
        return Profile()

    logger.debug(f"Using profile {selected!r} from {path}")
    return profile


def ensure_config_file(path: Path) -> bool:
    """Create the config file from a template if it does not exist.

    Returns:
        True if the file was created
    """
    if path.exists():
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"failed to create config file {path}: {e}") from e
    return True
