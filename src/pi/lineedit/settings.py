"""Line editor settings with JSON persistence.

Settings live under the ``"lineEditor"`` key of the shared ``settings.json``
files: the global one in ``~/.pi`` and the project one in ``<cwd>/.pi``.
Project values win over global ones.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from pi.lineedit.decoder import DEFAULT_MAX_ESCAPE_LENGTH
from pi.lineedit.overlay import DEFAULT_COMMAND_PREFIX

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".pi"
SETTINGS_FILE_NAME = "settings.json"
SETTINGS_KEY = "lineEditor"

# JSON key -> dataclass field
_JSON_KEYS: dict[str, str] = {
    "commandPrefix": "command_prefix",
    "collapsePastedNewlines": "collapse_pasted_newlines",
    "clearOnSubmit": "clear_on_submit",
    "maxEscapeLength": "max_escape_length",
}


@dataclass
class LineEditorSettings:
    """Tunable behaviour of the line editor."""

    command_prefix: str = DEFAULT_COMMAND_PREFIX
    collapse_pasted_newlines: bool = True
    clear_on_submit: bool = True
    max_escape_length: int = DEFAULT_MAX_ESCAPE_LENGTH

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LineEditorSettings:
        """Build settings from camelCase JSON, keeping defaults for bad values."""
        settings = cls()
        types = {f.name: type(getattr(settings, f.name)) for f in fields(cls)}
        for key, value in data.items():
            name = _JSON_KEYS.get(key)
            if name is None or value is None:
                continue
            # bool is an int subclass; reject it for int fields
            if not isinstance(value, types[name]) or (types[name] is int and isinstance(value, bool)):
                logger.warning("Ignoring %s=%r: expected %s", key, value, types[name].__name__)
                continue
            setattr(settings, name, value)

        if len(settings.command_prefix) != 1:
            logger.warning("Ignoring commandPrefix=%r: must be one character", settings.command_prefix)
            settings.command_prefix = DEFAULT_COMMAND_PREFIX
        if settings.max_escape_length < 3:
            logger.warning("Ignoring maxEscapeLength=%r: too small", settings.max_escape_length)
            settings.max_escape_length = DEFAULT_MAX_ESCAPE_LENGTH
        return settings

    def to_dict(self) -> dict[str, Any]:
        return {key: getattr(self, name) for key, name in _JSON_KEYS.items()}


def deep_merge_settings(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge overrides into base; ``None`` overrides are skipped."""
    result = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge_settings(result[key], value)
        else:
            result[key] = value
    return result


def _load_from_file(path: str) -> dict[str, Any]:
    """Load the line editor section of a settings file, ``{}`` if unusable."""
    if not os.path.exists(path):
        return {}
    try:
        settings = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Could not read settings from %s: %s", path, e)
        return {}
    section = settings.get(SETTINGS_KEY) if isinstance(settings, dict) else None
    if section is None:
        return {}
    if not isinstance(section, dict):
        logger.warning("Ignoring %r in %s: expected an object", SETTINGS_KEY, path)
        return {}
    return section


def _default_agent_dir() -> str:
    """Default agent data directory (~/.pi)."""
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME)


def load_settings(
    cwd: str | None = None,
    agent_dir: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> LineEditorSettings:
    """Load global, then project, then explicit override settings."""
    adir = agent_dir or _default_agent_dir()
    merged = _load_from_file(os.path.join(adir, SETTINGS_FILE_NAME))
    if cwd is not None:
        project = _load_from_file(os.path.join(cwd, CONFIG_DIR_NAME, SETTINGS_FILE_NAME))
        merged = deep_merge_settings(merged, project)
    if overrides:
        merged = deep_merge_settings(merged, overrides)
    return LineEditorSettings.from_dict(merged)
