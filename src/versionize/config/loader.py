"""Loading configuration from pyproject.toml."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from versionize.config.models import VersionizeConfig
from versionize.exceptions import ConfigNotFoundError, ConfigValidationError
from versionize.logging import get_logger

log = get_logger(__name__)

TOOL_KEY = "versionize"


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find pyproject.toml in ``start`` or any of its parents.

    Raises:
        ConfigNotFoundError: If no pyproject.toml exists up to the filesystem root
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    raise ConfigNotFoundError(f"No pyproject.toml found in {current} or its parents")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"File not found: {path}")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_versionize_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.versionize]`` table, or an empty dict."""
    return dict(pyproject.get("tool", {}).get(TOOL_KEY, {}))


def load_config(path: Path | None = None) -> VersionizeConfig:
    """Load versionize configuration for the project at ``path``.

    A missing pyproject.toml or a missing ``[tool.versionize]`` table yields
    the default configuration.
    """
    try:
        pyproject_path = find_pyproject_toml(path)
    except ConfigNotFoundError:
        log.debug("config_defaults", reason="no pyproject.toml")
        return VersionizeConfig()

    raw = extract_versionize_config(load_pyproject_toml(pyproject_path))
    try:
        config = VersionizeConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid [tool.{TOOL_KEY}] in {pyproject_path}:\n{e}") from e

    log.debug("config_loaded", path=str(pyproject_path))
    return config


def _project_table(path: Path | None) -> tuple[Path, dict[str, Any]]:
    pyproject_path = find_pyproject_toml(path)
    data = load_pyproject_toml(pyproject_path)
    return pyproject_path, data.get("project", {})


def get_project_name(path: Path | None = None) -> str:
    """Return ``[project].name``.

    Raises:
        ConfigValidationError: If the name is missing
    """
    pyproject_path, project = _project_table(path)
    name = project.get("name")
    if not name:
        raise ConfigValidationError(f"No [project].name in {pyproject_path}")
    return str(name)


def get_project_version(path: Path | None = None) -> str:
    """Return ``[project].version``.

    Raises:
        ConfigValidationError: If the version is missing
    """
    pyproject_path, project = _project_table(path)
    version = project.get("version")
    if not version:
        raise ConfigValidationError(f"No [project].version in {pyproject_path}")
    return str(version)
