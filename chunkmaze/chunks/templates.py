"""
Chunk templates and the template library.

A template is a pre-authored level segment: a collision volume plus an
ordered list of connection points. The library partitions templates into
reusable ones (drawable any number of times) and single-use ones (drawable
for at most one successful placement per generation pass).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..errors import TemplateError
from ..geometry import vec3
from .connection_point import ConnectionPoint

logger = logging.getLogger(__name__)


@dataclass
class CollisionVolume:
    """Box collider in the chunk's local frame.

    Attributes:
        center: Local center of the box
        half_extents: Half size along local X, Y, Z
    """
    center: np.ndarray = field(default_factory=lambda: np.zeros(3))
    half_extents: np.ndarray = field(default_factory=lambda: np.full(3, 0.5))

    def __post_init__(self):
        self.center = vec3(self.center)
        self.half_extents = vec3(self.half_extents)
        if np.any(self.half_extents <= 0):
            raise TemplateError(f"Collision half extents must be positive, got {self.half_extents}")

    @classmethod
    def from_size(cls, size, center=(0.0, 0.0, 0.0)) -> 'CollisionVolume':
        return cls(center=center, half_extents=vec3(size) / 2.0)

    @property
    def size(self) -> np.ndarray:
        return self.half_extents * 2.0


@dataclass
class ChunkTemplate:
    """A placeable chunk definition.

    Attributes:
        name: Unique template identifier
        collision: Collision volume used for overlap tests
        connection_points: Ordered sockets; copied into each instance
        metadata: Free-form data for content systems
    """
    name: str
    collision: CollisionVolume
    connection_points: List[ConnectionPoint] = field(default_factory=list)
    metadata: Dict = field(default_factory=dict)

    def __post_init__(self):
        if not self.connection_points:
            raise TemplateError(f"Template '{self.name}' declares no connection points")
        names = [p.name for p in self.connection_points]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise TemplateError(
                f"Template '{self.name}' has duplicate connection point names: {', '.join(duplicates)}"
            )

    @property
    def point_count(self) -> int:
        return len(self.connection_points)

    def instantiate_points(self) -> List[ConnectionPoint]:
        """Fresh per-instance copies of every socket."""
        return [p.instantiate() for p in self.connection_points]

    def __hash__(self) -> int:
        return hash(self.name)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ChunkTemplate):
            return NotImplemented
        return self.name == other.name


class ChunkLibrary:
    """Registry of placeable chunk templates.

    Templates are keyed by name. Registration order is preserved so that a
    seeded generation is reproducible.
    """

    def __init__(self, reusable: Sequence[ChunkTemplate] = (),
                 single_use: Sequence[ChunkTemplate] = ()):
        self._reusable: List[ChunkTemplate] = []
        self._single_use: List[ChunkTemplate] = []
        self._by_name: Dict[str, ChunkTemplate] = {}
        for template in reusable:
            self.register(template)
        for template in single_use:
            self.register(template, single_use=True)

    def register(self, template: ChunkTemplate, single_use: bool = False) -> None:
        """Add a template to the library.

        Raises:
            TemplateError: if a template with the same name is already registered
        """
        if template.name in self._by_name:
            raise TemplateError(f"Template '{template.name}' is already registered")
        self._by_name[template.name] = template
        if single_use:
            self._single_use.append(template)
        else:
            self._reusable.append(template)
        logger.debug("Registered %s template '%s' (%d sockets)",
                     "single-use" if single_use else "reusable",
                     template.name, template.point_count)

    @property
    def reusable(self) -> Tuple[ChunkTemplate, ...]:
        return tuple(self._reusable)

    @property
    def single_use(self) -> Tuple[ChunkTemplate, ...]:
        return tuple(self._single_use)

    def get(self, name: str) -> Optional[ChunkTemplate]:
        return self._by_name.get(name)

    def is_single_use(self, template: ChunkTemplate) -> bool:
        return any(t is template for t in self._single_use)

    def list_templates(self) -> List[str]:
        return [t.name for t in self._reusable + self._single_use]

    def validate(self) -> List[str]:
        """Return configuration problems that prevent generation."""
        errors = []
        if not self._reusable:
            errors.append("Chunk library has no reusable templates to seed the maze")
        return errors

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, name: str) -> bool:
        return name in self._by_name
