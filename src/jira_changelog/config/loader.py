"""Configuration loading.

Sources are tried in order, the first one found wins:

1. An explicit ``--config`` path (``.py`` or ``.toml``)
2. ``changelog_config.py`` in the repository root
3. ``[tool.jira-changelog]`` in the repository's pyproject.toml
4. Built-in defaults
"""

from __future__ import annotations

import importlib.util
import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from jira_changelog.config.models import ChangelogConfig
from jira_changelog.exceptions import ConfigNotFoundError, ConfigValidationError

logger = logging.getLogger(__name__)

CONFIG_MODULE_NAME = "changelog_config.py"
PYPROJECT_TOOL_KEY = "jira-changelog"


def load_toml(path: Path) -> dict[str, Any]:
    """Load and parse a TOML file.

    Args:
        path: Path to the TOML file

    Returns:
        Parsed TOML data

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigValidationError: If the file isn't valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_tool_config(data: dict[str, Any]) -> dict[str, Any]:
    """Extract the [tool.jira-changelog] section from parsed TOML.

    Returns an empty dict when the section is missing.
    """
    tool_section: dict[str, Any] = data.get("tool", {})
    return tool_section.get(PYPROJECT_TOOL_KEY, {})


def load_python_config(path: Path) -> dict[str, Any] | ChangelogConfig:
    """Import a Python config module and return its ``config`` object.

    Args:
        path: Path to the ``.py`` config module

    Returns:
        The module's ``config`` attribute, a dict or a ChangelogConfig

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigValidationError: If the module fails to import or has no ``config``
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Config file not found: {path}")

    spec = importlib.util.spec_from_file_location(f"_jira_changelog_config_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise ConfigValidationError(f"Cannot import config module {path}")

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise ConfigValidationError(f"Error executing config module {path}: {e}") from e

    config = getattr(module, "config", None)
    if not isinstance(config, dict | ChangelogConfig):
        raise ConfigValidationError(
            f"{path} must define a 'config' dict or ChangelogConfig instance."
        )
    return config


def _read_config_file(path: Path) -> dict[str, Any] | ChangelogConfig:
    if path.suffix == ".py":
        return load_python_config(path)
    if path.suffix == ".toml":
        data = load_toml(path)
        # Accept both a dedicated file and a pyproject.toml-style layout
        return extract_tool_config(data) or data
    raise ConfigValidationError(f"Unsupported config file type: {path.name}")


def find_config_source(git_path: Path, config_path: Path | None = None) -> Path | None:
    """Locate the config file for a repository.

    Args:
        git_path: Repository root
        config_path: Explicit config path, relative paths resolved from git_path

    Returns:
        Path to the config file, or None when defaults should be used

    Raises:
        ConfigNotFoundError: If an explicit config path doesn't exist
    """
    if config_path is not None:
        candidate = config_path if config_path.is_absolute() else git_path / config_path
        if not candidate.is_file() and config_path.is_file():
            candidate = config_path.resolve()
        if not candidate.is_file():
            raise ConfigNotFoundError(f"Config file not found: {config_path}")
        return candidate

    module_path = git_path / CONFIG_MODULE_NAME
    if module_path.is_file():
        return module_path

    pyproject_path = git_path / "pyproject.toml"
    if pyproject_path.is_file() and extract_tool_config(load_toml(pyproject_path)):
        return pyproject_path

    return None


def load_config(git_path: Path, config_path: Path | None = None) -> ChangelogConfig:
    """Load configuration for a repository.

    Args:
        git_path: Repository root
        config_path: Optional explicit config file

    Returns:
        Validated configuration

    Raises:
        ConfigNotFoundError: If an explicit config path doesn't exist
        ConfigValidationError: If the configuration is invalid
    """
    source = find_config_source(git_path, config_path)
    if source is None:
        logger.debug("No config file found in %s, using defaults", git_path)
        return ChangelogConfig()

    logger.debug("Loading config from %s", source)
    raw = _read_config_file(source)
    if isinstance(raw, ChangelogConfig):
        return raw

    try:
        return ChangelogConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {source}:\n{e}") from e
