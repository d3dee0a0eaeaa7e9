"""
Post-growth pass framework.

A pass reads the grown maze off a GenerationState and mutates the state
(selecting sockets, spawning actors). Expected anomalies such as a missing
prefab or a degraded selection never raise; they are reported on the
PassResult and generation carries on.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..generation_state import GenerationState


@dataclass
class PassConfig:
    """Per-run switches for a pass.

    Attributes:
        enabled: False skips the pass entirely
        options: Pass-specific overrides (see each pass's docstring)
    """
    enabled: bool = True
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PassResult:
    """What a pass did to the state.

    Attributes:
        success: False once any step was skipped for a configuration error
        state: The state the pass ran on
        warnings: Tolerated anomalies
        errors: Configuration errors
        metrics: Counters for the generation report
    """
    success: bool
    state: GenerationState
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.success = False


class MazePass(ABC):
    """A composable step run after growth."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    def description(self) -> str:
        return ""

    @abstractmethod
    def execute(self, state: GenerationState, config: PassConfig) -> PassResult:
        """
        Apply the pass to ``state``.

        Args:
            state: State holding the grown maze
            config: Switches and option overrides

        Returns:
            PassResult describing warnings, errors and metrics
        """
        pass

    def validate_preconditions(self, state: GenerationState) -> List[str]:
        """Reasons the state cannot be processed; empty when it can."""
        if state.maze is None or not state.maze.chunks:
            return ["No chunks placed"]
        return []

    def run(self, state: GenerationState, config: Optional[PassConfig] = None) -> PassResult:
        """Check preconditions, then execute. Prefer this over ``execute``."""
        if config is None:
            config = PassConfig()
        if not config.enabled:
            return PassResult(success=True, state=state)

        problems = self.validate_preconditions(state)
        if not problems:
            return self.execute(state, config)

        result = PassResult(success=False, state=state)
        for problem in problems:
            result.add_error(f"Precondition failed: {problem}")
        return result
