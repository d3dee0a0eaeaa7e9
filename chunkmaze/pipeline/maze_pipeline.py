"""
Maze generation pipeline.

Orchestrates one synchronous generation pass: growth, navigation baking,
exit/enemy selection and population. ``MazeGenerator.regenerate()`` tears
the current maze down and reruns the pass with a larger depth budget,
keeping the existing player.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..chunks.templates import ChunkLibrary
from ..errors import MazeConfigError
from ..geometry import Pose, vec3
from ..growth.engine import GrowthEngine
from ..growth.maze import Maze
from ..spatial.oracle import BoxOverlapOracle, SpatialOracle
from ..validation.core import ValidationResult
from ..validation.maze_checks import validate_maze
from ..world.rng import RandomSource
from ..world.scene import (
    AssetCatalog,
    InMemoryScene,
    MOVEMENT_CONTROLLER,
    PLAYER_TAG,
    Prefab,
    SceneMutator,
    default_assets,
)
from .generation_state import GenerationState, Marker, MarkerType, SelectionResult
from .passes.base import PassConfig, PassResult
from .passes.population_passes import Populator
from .passes.selection_passes import PostProcessSelector
from .settings import MazeSettings

logger = logging.getLogger(__name__)

MAZE_ROOT = Prefab("Maze")

# Upper bound (exclusive) for per-pass seeds drawn from the generator's source
MAX_PASS_SEED = 2**31 - 1


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PipelineStage(Enum):
    TEARDOWN = "teardown"
    GROW = "grow"
    BAKE_NAVIGATION = "bake_navigation"
    SELECT = "select"
    RELOCATE_PLAYER = "relocate_player"
    POPULATE = "populate"
    COMPLETE = "complete"


# ---------------------------------------------------------------------------
# Result dataclass
# ---------------------------------------------------------------------------

@dataclass
class GenerationReport:
    success: bool
    seed: int
    depth_budget: int
    maze: Optional[Maze] = None
    selection: Optional[SelectionResult] = None
    markers: List[Marker] = field(default_factory=list)
    stages_completed: List[PipelineStage] = field(default_factory=list)
    validation: Optional[ValidationResult] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_time(self) -> float:
        return self.metrics.get("total_time", 0.0)

    def add_error(self, error: str, stage: Optional[PipelineStage] = None):
        if stage:
            error = f"[{stage.value}] {error}"
        self.errors.append(error)
        self.success = False

    def add_warning(self, warning: str, stage: Optional[PipelineStage] = None):
        if stage:
            warning = f"[{stage.value}] {warning}"
        self.warnings.append(warning)

    def absorb(self, pass_result: PassResult, stage: PipelineStage) -> None:
        for warning in pass_result.warnings:
            self.add_warning(warning, stage)
        for error in pass_result.errors:
            self.add_error(error, stage)
        self.metrics.update(pass_result.metrics)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

class MazeGenerator:
    """Builds chunk mazes into a scene and regenerates them on demand.

    Args:
        library: Template catalogue
        assets: Actor prefabs and exit material (defaults to ``default_assets()``)
        scene: World mutator (defaults to a fresh ``InMemoryScene``)
        settings: Initial settings
        oracle: Overlap oracle (defaults to ``BoxOverlapOracle``)
        nav_baker: Called once per pass after growth, before selection
    """

    def __init__(self, library: ChunkLibrary, assets: Optional[AssetCatalog] = None,
                 scene: Optional[SceneMutator] = None,
                 settings: Optional[MazeSettings] = None,
                 oracle: Optional[SpatialOracle] = None,
                 nav_baker: Optional[Callable[[], None]] = None):
        self.library = library
        self.assets = assets if assets is not None else default_assets()
        self.scene = scene if scene is not None else InMemoryScene()
        self.settings = settings or MazeSettings()
        self.oracle = oracle or BoxOverlapOracle()
        self.nav_baker = nav_baker
        self.state: Optional[GenerationState] = None
        self.rng: Optional[RandomSource] = None
        self._seeded_with: Optional[int] = None
        self.generation_count = 0
        self._validate_settings(self.settings)

    # -- helpers --

    def _validate_settings(self, settings: MazeSettings):
        errors = settings.validate() + self.library.validate()
        if errors:
            raise MazeConfigError(f"Invalid settings: {'; '.join(errors)}")

    def _find_player(self) -> Optional[int]:
        """Player spawned by this generator, else any node tagged as the player."""
        if self.state is not None:
            tracked = self.state.player_handle
            if tracked is not None and self.scene.exists(tracked):
                return tracked
        return self.scene.find_by_tag(PLAYER_TAG)

    def _pass_rng(self, settings: MazeSettings, explicit: bool) -> RandomSource:
        """Random source for one pass, seeded so the reported seed replays it.

        An explicit or changed ``settings.seed`` reseeds the generator and the
        pass runs on that seed. Otherwise the pass seed is drawn from the
        generator's own source.
        """
        seed = settings.seed
        if seed is not None and (explicit or self.rng is None or seed != self._seeded_with):
            self.rng = RandomSource(seed)
            self._seeded_with = seed
            return RandomSource(seed)
        if self.rng is None:
            self.rng = RandomSource()
            return RandomSource(self.rng.seed)
        return RandomSource(self.rng.range(0, MAX_PASS_SEED))

    def _new_state(self, settings: MazeSettings, explicit: bool = False) -> GenerationState:
        rng = self._pass_rng(settings, explicit)
        root = self.state.root if self.state is not None else None
        if root is None or not self.scene.exists(root):
            root = self.scene.instantiate(MAZE_ROOT, Pose.identity())
        return GenerationState(
            library=self.library,
            assets=self.assets,
            settings=settings,
            scene=self.scene,
            oracle=self.oracle,
            rng=rng,
            root=root,
        )

    # -- public API --

    def generate(self, settings: Optional[MazeSettings] = None) -> GenerationReport:
        """First-time generation: build the maze and spawn the player.

        Any previous maze, actors and player are destroyed first.
        """
        explicit = settings is not None
        settings = settings or self.settings
        self._validate_settings(settings)
        self.settings = settings

        report_start = time.time()
        if self.state is not None:
            self._teardown(self.state, keep_player=False)
        self.state = self._new_state(settings, explicit)
        report = self._build(self.state)
        self._populate(self.state, report, spawn_player=True)
        return self._finish(self.state, report, report_start)

    def regenerate(self, settings: Optional[MazeSettings] = None) -> GenerationReport:
        """Tear down the current maze and rebuild it with a larger budget.

        The depth budget grows by ``depth_increment``. The existing player is
        located, moved to ``player_anchor`` with its movement controller
        disabled during the move, and batteries are repopulated.
        """
        explicit = settings is not None
        base = settings or self.settings
        self._validate_settings(base)
        settings = base.escalated()
        logger.info("Regenerating maze: depth budget %d -> %d",
                    base.depth_budget, settings.depth_budget)

        report_start = time.time()
        player = self._find_player()
        if self.state is not None:
            self._teardown(self.state, keep_player=True)
        self.settings = settings
        self.state = self._new_state(settings, explicit)
        self.state.player_handle = player

        report = self._build(self.state)
        report.stages_completed.insert(0, PipelineStage.TEARDOWN)
        self._relocate_player(self.state, report)
        self._populate(self.state, report, spawn_player=False)
        return self._finish(self.state, report, report_start)

    # -- stages --

    def _teardown(self, state: GenerationState, keep_player: bool) -> None:
        """Destroy every chunk and spawned actor; clear the maze."""
        if state.maze is not None:
            for chunk in state.maze.chunks:
                if chunk.handle is not None:
                    self.scene.destroy(chunk.handle)
            state.maze.clear()
        for handle in state.actor_handles:
            self.scene.destroy(handle)
        state.actor_handles.clear()
        state.markers.clear()
        if not keep_player and state.player_handle is not None:
            self.scene.destroy(state.player_handle)
            state.player_handle = None

    def _build(self, state: GenerationState) -> GenerationReport:
        settings = state.settings
        report = GenerationReport(success=True, seed=state.seed, depth_budget=settings.depth_budget)

        engine = GrowthEngine(
            self.oracle, state.rng,
            margin=settings.overlap_margin,
            marker_matching=settings.marker_matching,
            scene=self.scene,
            parent=state.root,
        )
        state.maze = engine.grow(self.library, settings.depth_budget)
        report.maze = state.maze
        report.stages_completed.append(PipelineStage.GROW)
        report.metrics['chunks_placed'] = len(state.maze.chunks)
        report.metrics['depth'] = state.maze.depth
        report.metrics['dead_ends'] = len(state.maze.dead_ends)
        report.metrics['open_sockets'] = len(state.maze.frontier)
        report.metrics['template_draws'] = list(engine.last_pool.draws)

        report.validation = validate_maze(state.maze, self.oracle, settings.overlap_margin)
        for issue in report.validation.errors:
            logger.error(issue.format())
            report.add_error(issue.message, PipelineStage.GROW)

        if self.nav_baker is not None:
            self.nav_baker()
        report.stages_completed.append(PipelineStage.BAKE_NAVIGATION)

        selected = PostProcessSelector().run(state)
        report.absorb(selected, PipelineStage.SELECT)
        report.selection = state.selection
        report.stages_completed.append(PipelineStage.SELECT)
        return report

    def _relocate_player(self, state: GenerationState, report: GenerationReport) -> None:
        player = state.player_handle
        if player is None or not self.scene.exists(player):
            report.add_warning("No existing player to relocate", PipelineStage.RELOCATE_PLAYER)
            logger.warning("Regeneration found no player to relocate")
            return

        anchor = vec3(state.settings.player_anchor)
        had_controller = self.scene.set_component_enabled(player, MOVEMENT_CONTROLLER, False)
        self.scene.set_position(player, anchor)
        if had_controller:
            self.scene.set_component_enabled(player, MOVEMENT_CONTROLLER, True)

        state.add_marker(Marker(
            name="SpawnPoint",
            marker_type=MarkerType.SPAWN_POINT,
            position=tuple(float(c) for c in anchor),
            handle=player,
            tags={'is_primary': True, 'relocated': True},
        ))
        report.stages_completed.append(PipelineStage.RELOCATE_PLAYER)

    def _populate(self, state: GenerationState, report: GenerationReport, spawn_player: bool) -> None:
        populated = Populator().run(state, PassConfig(options={'spawn_player': spawn_player}))
        report.absorb(populated, PipelineStage.POPULATE)
        report.stages_completed.append(PipelineStage.POPULATE)

    def _finish(self, state: GenerationState, report: GenerationReport, started: float) -> GenerationReport:
        self.generation_count += 1
        report.markers = list(state.markers)
        report.stages_completed.append(PipelineStage.COMPLETE)
        report.metrics['total_time'] = time.time() - started
        report.metrics['generation'] = self.generation_count
        logger.info("Generation %d complete: %d chunks, depth %d/%d, %d warning(s), %d error(s)",
                    self.generation_count, len(state.maze.chunks), state.maze.depth,
                    state.settings.depth_budget, len(report.warnings), len(report.errors))
        return report
