"""
JSON persistence for chunk template catalogues.

Document shape::

    {
      "reusable": [<template>, ...],
      "single_use": [<template>, ...]
    }

    <template> = {
      "name": "Crossroads",
      "collision": {"center": [0, 2, 0], "half_extents": [5, 2, 5]},
      "connection_points": [
        {"name": "north", "position": [0, 0, 0], "connection_offset": [0, 0, 5],
         "dead_end": {"name": "DeadEnd_North", "position": [0, 2, 5], "size": [4, 4, 0.5]}}
      ],
      "metadata": {}
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from ..errors import TemplateError
from ..geometry import as_tuple
from .connection_point import ConnectionPoint, DeadEndMarker
from .templates import ChunkLibrary, ChunkTemplate, CollisionVolume

logger = logging.getLogger(__name__)


def _point_from_dict(data: Dict[str, Any]) -> ConnectionPoint:
    marker = None
    marker_data = data.get("dead_end")
    if marker_data:
        marker = DeadEndMarker(
            name=marker_data["name"],
            position=marker_data.get("position", (0.0, 0.0, 0.0)),
            size=marker_data.get("size", (1.0, 1.0, 1.0)),
        )
    return ConnectionPoint(
        name=data["name"],
        position=data.get("position", (0.0, 0.0, 0.0)),
        connection_offset=data.get("connection_offset", (0.0, 0.0, 0.0)),
        dead_end=marker,
    )


def template_from_dict(data: Dict[str, Any]) -> ChunkTemplate:
    """Create a ChunkTemplate from a dictionary.

    Raises:
        TemplateError: if required keys are missing or malformed
    """
    try:
        collision = data["collision"]
        return ChunkTemplate(
            name=data["name"],
            collision=CollisionVolume(
                center=collision.get("center", (0.0, 0.0, 0.0)),
                half_extents=collision["half_extents"],
            ),
            connection_points=[_point_from_dict(p) for p in data.get("connection_points", [])],
            metadata=dict(data.get("metadata", {})),
        )
    except (KeyError, TypeError, ValueError) as e:
        name = data.get("name", "<unnamed>") if isinstance(data, dict) else "<invalid>"
        raise TemplateError(f"Malformed template '{name}': {e}") from e


def template_to_dict(template: ChunkTemplate) -> Dict[str, Any]:
    """Convert a ChunkTemplate to a JSON-serializable dictionary."""
    points = []
    for point in template.connection_points:
        marker = None
        if point.dead_end is not None:
            marker = {
                "name": point.dead_end.name,
                "position": list(as_tuple(point.dead_end.position)),
                "size": list(as_tuple(point.dead_end.size)),
            }
        points.append({
            "name": point.name,
            "position": list(as_tuple(point.position)),
            "connection_offset": list(as_tuple(point.connection_offset)),
            "dead_end": marker,
        })
    return {
        "name": template.name,
        "collision": {
            "center": list(as_tuple(template.collision.center)),
            "half_extents": list(as_tuple(template.collision.half_extents)),
        },
        "connection_points": points,
        "metadata": dict(template.metadata),
    }


def library_from_dict(data: Dict[str, Any]) -> ChunkLibrary:
    if not isinstance(data, dict):
        raise TemplateError("Template catalogue must be a JSON object")
    library = ChunkLibrary()
    for entry in data.get("reusable", []):
        library.register(template_from_dict(entry))
    for entry in data.get("single_use", []):
        library.register(template_from_dict(entry), single_use=True)
    logger.info("Loaded %d reusable and %d single-use templates",
                len(library.reusable), len(library.single_use))
    return library


def library_to_dict(library: ChunkLibrary) -> Dict[str, Any]:
    return {
        "reusable": [template_to_dict(t) for t in library.reusable],
        "single_use": [template_to_dict(t) for t in library.single_use],
    }


def load_library(path: Union[str, Path]) -> ChunkLibrary:
    """Load a ChunkLibrary from a JSON file.

    Raises:
        TemplateError: if the file is not valid JSON or a template is malformed
        OSError: if the file cannot be read
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise TemplateError(f"Invalid JSON in template catalogue {path}: {e}") from e
    return library_from_dict(data)


def save_library(library: ChunkLibrary, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(library_to_dict(library), f, indent=2)
    return path
