"""
Settings persistence layer.

Handles save/load of MazeSettings as JSON, by default under
~/.config/chunkmaze/
"""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..errors import MazeConfigError
from ..growth.aligner import MarkerMatching
from .settings import MazeSettings

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "settings.json"


def get_settings_dir() -> Path:
    """
    Get the directory for storing settings.

    Returns:
        Path to ~/.config/chunkmaze/
        Creates the directory if it doesn't exist.
    """
    config_dir = Path.home() / ".config" / "chunkmaze"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def settings_to_dict(settings: MazeSettings) -> Dict[str, Any]:
    """Convert MazeSettings to a JSON-serializable dictionary."""
    data = dataclasses.asdict(settings)
    data["marker_matching"] = settings.marker_matching.value
    data["player_anchor"] = list(settings.player_anchor)
    return data


def settings_from_dict(data: Dict[str, Any]) -> MazeSettings:
    """Create MazeSettings from a dictionary.

    Missing keys take their defaults; unknown keys are ignored with a warning.

    Raises:
        MazeConfigError: if a value cannot be converted
    """
    known = {f.name for f in dataclasses.fields(MazeSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("Ignoring unknown settings keys: %s", ", ".join(unknown))

    values = {k: v for k, v in data.items() if k in known}
    try:
        if "marker_matching" in values:
            values["marker_matching"] = MarkerMatching(values["marker_matching"])
        if "player_anchor" in values:
            values["player_anchor"] = tuple(float(c) for c in values["player_anchor"])
    except (TypeError, ValueError) as e:
        raise MazeConfigError(f"Invalid settings value: {e}") from e
    return MazeSettings(**values)


def save_settings(settings: MazeSettings, path: Optional[Union[str, Path]] = None) -> Path:
    """
    Save settings as JSON.

    Args:
        settings: Settings to save
        path: Target file; defaults to settings.json in the settings directory

    Returns:
        Path to the saved file
    """
    path = Path(path) if path is not None else get_settings_dir() / SETTINGS_FILENAME
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings_to_dict(settings), f, indent=2)
    logger.info(f"Saved settings to {path}")
    return path


def load_settings(path: Optional[Union[str, Path]] = None) -> MazeSettings:
    """
    Load settings from JSON.

    Returns defaults when the default settings file does not exist yet.

    Raises:
        MazeConfigError: if the file is not valid JSON or holds bad values
    """
    explicit = path is not None
    path = Path(path) if explicit else get_settings_dir() / SETTINGS_FILENAME
    if not path.exists():
        if explicit:
            raise MazeConfigError(f"Settings file not found: {path}")
        return MazeSettings()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise MazeConfigError(f"Invalid JSON in settings file {path}: {e}") from e
    if not isinstance(data, dict):
        raise MazeConfigError(f"Settings file {path} must contain a JSON object")
    return settings_from_dict(data)
