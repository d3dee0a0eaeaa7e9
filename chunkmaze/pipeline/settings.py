"""
Immutable generation settings.

Budgets, margins and spawn parameters are passed explicitly into
``MazeGenerator.generate()`` / ``regenerate()``; regeneration derives a new
settings object rather than mutating shared state.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from ..growth.aligner import MarkerMatching

# Attempt bound for the exit/enemy socket searches
DEFAULT_SELECTION_ATTEMPTS = 100

# Budget added on every regeneration
DEFAULT_DEPTH_INCREMENT = 5


@dataclass(frozen=True)
class MazeSettings:
    # Growth
    depth_budget: int = 10
    depth_increment: int = DEFAULT_DEPTH_INCREMENT
    overlap_margin: float = 1.0
    marker_matching: MarkerMatching = MarkerMatching.IDENTITY

    # Selection
    selection_max_attempts: int = DEFAULT_SELECTION_ATTEMPTS

    # Exit decoration
    exit_light_range: float = 20.0
    exit_light_intensity: float = 20.0
    exit_light_offset: float = 0.5

    # Population
    batteries_per_maze: int = 3
    battery_scatter: float = 4.0
    battery_height: float = 1.0
    player_spawn_height: float = 1.0
    player_anchor: Tuple[float, float, float] = (0.0, 1.0, 0.0)

    # Seeding for reproducible generation
    seed: Optional[int] = None  # None = random seed, otherwise deterministic

    def validate(self) -> List[str]:
        """Return a list of problems; empty when the settings are usable."""
        errors = []
        if self.depth_budget < 0:
            errors.append("Depth budget must be >= 0")
        if self.depth_increment <= 0:
            errors.append("Depth increment must be > 0")
        if self.overlap_margin < 0:
            errors.append("Overlap margin must be >= 0")
        if self.selection_max_attempts < 0:
            errors.append("Selection attempt bound must be >= 0")
        if self.batteries_per_maze < 0:
            errors.append("Battery count must be >= 0")
        if self.battery_scatter < 0:
            errors.append("Battery scatter must be >= 0")
        if len(self.player_anchor) != 3:
            errors.append("Player anchor must have three components")
        return errors

    def with_depth_budget(self, depth_budget: int) -> 'MazeSettings':
        return replace(self, depth_budget=depth_budget)

    def escalated(self) -> 'MazeSettings':
        """Settings for the next regeneration: budget raised by the increment."""
        return self.with_depth_budget(self.depth_budget + self.depth_increment)
