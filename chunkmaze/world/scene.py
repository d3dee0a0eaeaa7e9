"""
World/scene mutator boundary and an in-memory scene graph.

The generator never touches engine state directly. It materialises chunks
and actors through ``SceneMutator``: instantiate, destroy, reparent, and a
handful of setters used to decorate the exit and move the player. Any
engine binding can implement the interface; ``InMemoryScene`` is the
headless reference used by tools and tests.
"""

from __future__ import annotations

import itertools
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..geometry import Pose, vec3, Vec3Like

logger = logging.getLogger(__name__)

Color = Tuple[float, float, float, float]

PLAYER_TAG = "Player"
MOVEMENT_CONTROLLER = "CharacterController"


# ==============================================================================
# ASSETS
# ==============================================================================

@dataclass(frozen=True)
class Prefab:
    """Reference to an instantiable asset."""
    name: str
    tag: Optional[str] = None
    components: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Material:
    name: str
    emission_color: Color = (1.0, 1.0, 1.0, 1.0)


@dataclass(frozen=True)
class AssetCatalog:
    """Prefabs and materials the generator spawns besides chunks.

    Attributes:
        player: Player prefab; spawned on first generation only
        enemy: Enemy prefab spawned at the enemy socket
        battery: Collectible prefab
        exit_material: Material applied to the exit cap; its emission colours
            the exit light
    """
    player: Optional[Prefab] = None
    enemy: Optional[Prefab] = None
    battery: Optional[Prefab] = None
    exit_material: Optional[Material] = None


def default_assets() -> AssetCatalog:
    return AssetCatalog(
        player=Prefab("Player", tag=PLAYER_TAG, components=(MOVEMENT_CONTROLLER,)),
        enemy=Prefab("Enemy", tag="Enemy"),
        battery=Prefab("Battery", tag="Battery"),
        exit_material=Material("ExitGlow", emission_color=(0.2, 1.0, 0.4, 1.0)),
    )


# ==============================================================================
# MUTATOR INTERFACE
# ==============================================================================

class SceneMutator(ABC):
    """Operations the generator performs on the world."""

    @abstractmethod
    def instantiate(self, source: Any, pose: Pose, parent: Optional[int] = None) -> int:
        """Create a node from ``source`` (anything with a ``name``) and return its handle."""

    @abstractmethod
    def destroy(self, handle: int) -> None:
        """Destroy a node and all of its children."""

    @abstractmethod
    def set_parent(self, handle: int, parent: Optional[int]) -> None:
        pass

    @abstractmethod
    def set_active(self, handle: int, active: bool) -> None:
        pass

    @abstractmethod
    def set_position(self, handle: int, position: Vec3Like) -> None:
        pass

    @abstractmethod
    def set_material(self, handle: int, material: Material) -> None:
        pass

    @abstractmethod
    def add_component(self, handle: int, kind: str, **properties) -> None:
        pass

    @abstractmethod
    def set_component_enabled(self, handle: int, kind: str, enabled: bool) -> bool:
        """Toggle a component; returns False if the node has no such component."""

    @abstractmethod
    def find_by_tag(self, tag: str) -> Optional[int]:
        pass

    @abstractmethod
    def exists(self, handle: int) -> bool:
        pass


# ==============================================================================
# IN-MEMORY SCENE
# ==============================================================================

@dataclass
class SceneNode:
    handle: int
    name: str
    pose: Pose
    parent: Optional[int] = None
    tag: Optional[str] = None
    active: bool = True
    material: Optional[Material] = None
    components: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    children: List[int] = field(default_factory=list)


class InMemoryScene(SceneMutator):
    """Scene graph held in a dictionary of nodes.

    ``history`` records every mutation as ``(operation, handle, detail)`` so
    callers can audit ordering (e.g. controller disabled before a teleport).
    """

    def __init__(self):
        self.nodes: Dict[int, SceneNode] = {}
        self.history: List[Tuple[str, int, Any]] = []
        self._handles = itertools.count(1)

    def _node(self, handle: int) -> SceneNode:
        try:
            return self.nodes[handle]
        except KeyError:
            raise KeyError(f"No scene node with handle {handle}") from None

    def instantiate(self, source: Any, pose: Pose, parent: Optional[int] = None) -> int:
        handle = next(self._handles)
        node = SceneNode(
            handle=handle,
            name=source.name,
            pose=Pose(pose.position.copy(), pose.yaw),
            tag=getattr(source, 'tag', None),
        )
        for kind in getattr(source, 'components', ()):
            node.components[kind] = {'enabled': True}
        self.nodes[handle] = node
        if parent is not None:
            self.set_parent(handle, parent)
        self.history.append(('instantiate', handle, source.name))
        return handle

    def destroy(self, handle: int) -> None:
        node = self.nodes.get(handle)
        if node is None:
            return
        for child in list(node.children):
            self.destroy(child)
        if node.parent is not None and node.parent in self.nodes:
            self.nodes[node.parent].children.remove(handle)
        del self.nodes[handle]
        self.history.append(('destroy', handle, node.name))

    def set_parent(self, handle: int, parent: Optional[int]) -> None:
        node = self._node(handle)
        if node.parent is not None and node.parent in self.nodes:
            self.nodes[node.parent].children.remove(handle)
        node.parent = parent
        if parent is not None:
            self._node(parent).children.append(handle)

    def set_active(self, handle: int, active: bool) -> None:
        self._node(handle).active = active
        self.history.append(('set_active', handle, active))

    def set_position(self, handle: int, position: Vec3Like) -> None:
        node = self._node(handle)
        node.pose = Pose(vec3(position), node.pose.yaw)
        self.history.append(('set_position', handle, tuple(node.pose.position)))

    def set_material(self, handle: int, material: Material) -> None:
        self._node(handle).material = material
        self.history.append(('set_material', handle, material.name))

    def add_component(self, handle: int, kind: str, **properties) -> None:
        props = {'enabled': True}
        props.update(properties)
        self._node(handle).components[kind] = props
        self.history.append(('add_component', handle, kind))

    def set_component_enabled(self, handle: int, kind: str, enabled: bool) -> bool:
        component = self._node(handle).components.get(kind)
        if component is None:
            return False
        component['enabled'] = enabled
        self.history.append(('set_component_enabled', handle, (kind, enabled)))
        return True

    def find_by_tag(self, tag: str) -> Optional[int]:
        for handle, node in self.nodes.items():
            if node.tag == tag:
                return handle
        return None

    def exists(self, handle: int) -> bool:
        return handle in self.nodes

    # -- queries used by tools and tests --

    def get(self, handle: int) -> SceneNode:
        return self._node(handle)

    def find_all_by_tag(self, tag: str) -> List[int]:
        return [h for h, n in self.nodes.items() if n.tag == tag]

    def find_all_by_name(self, name: str) -> List[int]:
        return [h for h, n in self.nodes.items() if n.name == name]

    def world_position(self, handle: int):
        """Node positions are stored in world space."""
        return self._node(handle).pose.position
