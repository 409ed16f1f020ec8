"""
Advanced Array Tool - Host Scene Model

Minimal in-memory scene graph the array tool spawns into. It provides the
contract the lifecycle controller relies on:

- create an empty container object
- instantiate a prefab into a new object
- parent, rename and transform objects
- destroy objects (recursively, tolerating already destroyed ones)
- snapshot / restore for undo and persistence

Objects are identified by UUID strings. A destroyed object's UUID simply stops
resolving, so stale references held elsewhere are detected with is_alive().

The Scene has no Qt imports and no knowledge of array sets.
"""

import logging
import uuid as uuid_module
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from array_tool.models.transform import Vec3, Quaternion, Transform
from array_tool.constants import BUILTIN_PREFABS


@dataclass
class Prefab:
    """Reference asset instantiated once per placement.

    Attributes:
        asset_id: Stable identity used in persisted records
        name: Name given to each instance
        scale: Local scale every fresh instance starts with
    """
    asset_id: str
    name: str
    scale: Vec3 = field(default_factory=Vec3.one)


class PrefabLibrary:
    """Collection of prefabs keyed by asset_id."""

    def __init__(self, prefabs: Optional[List[Prefab]] = None):
        self._prefabs: Dict[str, Prefab] = {}
        for prefab in prefabs or []:
            self.register(prefab)

    @classmethod
    def builtin(cls) -> 'PrefabLibrary':
        """Library holding the built-in primitives from constants."""
        return cls([Prefab(asset_id, name, Vec3(*scale))
                    for asset_id, (name, scale) in BUILTIN_PREFABS.items()])

    def register(self, prefab: Prefab):
        self._prefabs[prefab.asset_id] = prefab

    def get(self, asset_id: Optional[str]) -> Optional[Prefab]:
        if asset_id is None:
            return None
        return self._prefabs.get(asset_id)

    def __contains__(self, asset_id) -> bool:
        return asset_id in self._prefabs

    def __iter__(self) -> Iterator[Prefab]:
        return iter(self._prefabs.values())

    def __len__(self) -> int:
        return len(self._prefabs)


class SceneObject:
    """A node in the scene graph.

    Transforms are local to the parent object (or to the world for roots).
    """

    def __init__(self, name: str, uid: Optional[str] = None, parent_id: Optional[str] = None,
                 prefab_id: Optional[str] = None, transform: Optional[Transform] = None):
        self.uid = uid or str(uuid_module.uuid4())
        self.name = name
        self.parent_id = parent_id
        self.prefab_id = prefab_id
        self.transform = transform or Transform()

    def __repr__(self):
        return f"SceneObject(name={self.name!r}, uid={self.uid!r}, parent_id={self.parent_id!r})"

    @property
    def local_position(self) -> Vec3:
        return self.transform.position

    @local_position.setter
    def local_position(self, value: Vec3):
        self.transform.position = value

    @property
    def local_rotation(self) -> Quaternion:
        return self.transform.rotation

    @local_rotation.setter
    def local_rotation(self, value: Quaternion):
        self.transform.rotation = value

    @property
    def local_scale(self) -> Vec3:
        return self.transform.scale

    @local_scale.setter
    def local_scale(self, value: Vec3):
        self.transform.scale = value

    def to_dict(self) -> Dict[str, Any]:
        return {
            'uid': self.uid,
            'name': self.name,
            'parent_id': self.parent_id,
            'prefab_id': self.prefab_id,
            'position': self.transform.position.to_list(),
            'rotation': self.transform.rotation.to_list(),
            'scale': self.transform.scale.to_list(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SceneObject':
        return cls(
            name=str(data['name']),
            uid=str(data['uid']),
            parent_id=data.get('parent_id'),
            prefab_id=data.get('prefab_id'),
            transform=Transform(
                position=Vec3.from_seq(data.get('position', (0.0, 0.0, 0.0))),
                rotation=Quaternion.from_seq(data.get('rotation', (0.0, 0.0, 0.0, 1.0))),
                scale=Vec3.from_seq(data.get('scale', (1.0, 1.0, 1.0))),
            ),
        )


class Scene:
    """In-memory scene graph of UUID-identified objects."""

    def __init__(self):
        self._logger = logging.getLogger('Scene')
        self._objects: Dict[str, SceneObject] = {}

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[SceneObject]:
        return iter(list(self._objects.values()))

    # ========================================
    # Creation
    # ========================================

    def create_object(self, name: str, parent_id: Optional[str] = None) -> SceneObject:
        """Create an empty object, optionally parented.

        Args:
            name: Object name
            parent_id: UUID of a live parent, or None for a root object

        Returns:
            The new SceneObject
        """
        obj = SceneObject(name)
        self._objects[obj.uid] = obj
        if parent_id is not None:
            self.set_parent(obj.uid, parent_id)
        self._logger.debug(f"Created object {name} ({obj.uid})")
        return obj

    def instantiate(self, prefab: Prefab, parent_id: Optional[str] = None) -> SceneObject:
        """Instantiate a prefab into a new object.

        The instance is named after the prefab and starts with the prefab's
        local scale.
        """
        obj = self.create_object(prefab.name, parent_id=parent_id)
        obj.prefab_id = prefab.asset_id
        obj.local_scale = Vec3(*prefab.scale)
        return obj

    # ========================================
    # Hierarchy
    # ========================================

    def set_parent(self, uid: str, parent_id: Optional[str]):
        """Reparent an object, keeping its local transform.

        Raises:
            KeyError: If either object is not alive
            ValueError: If the parenting would create a cycle
        """
        obj = self._objects[uid]
        if parent_id is not None:
            if parent_id not in self._objects:
                raise KeyError(parent_id)
            ancestor = parent_id
            while ancestor is not None:
                if ancestor == uid:
                    raise ValueError(f"Cannot parent {uid} under its own descendant")
                ancestor = self._objects[ancestor].parent_id
        obj.parent_id = parent_id

    def get(self, uid: Optional[str]) -> Optional[SceneObject]:
        """Get a live object by UUID, or None if it was destroyed."""
        if uid is None:
            return None
        return self._objects.get(uid)

    def is_alive(self, uid: Optional[str]) -> bool:
        return uid is not None and uid in self._objects

    def children_of(self, uid: str) -> List[SceneObject]:
        """Direct children of an object, in creation order."""
        return [obj for obj in self._objects.values() if obj.parent_id == uid]

    def roots(self) -> List[SceneObject]:
        return [obj for obj in self._objects.values() if obj.parent_id is None]

    def rename(self, uid: str, name: str) -> bool:
        obj = self.get(uid)
        if obj is None:
            return False
        obj.name = name
        return True

    # ========================================
    # Destruction
    # ========================================

    def destroy(self, uid: Optional[str]) -> bool:
        """Destroy an object and all of its descendants.

        Args:
            uid: UUID of the object to destroy

        Returns:
            True if the object was alive, False if it was already gone
        """
        if not self.is_alive(uid):
            self._logger.debug(f"Destroy skipped, object already gone: {uid}")
            return False

        for child in self.children_of(uid):
            self.destroy(child.uid)
        del self._objects[uid]
        return True

    def clear(self):
        self._objects.clear()

    # ========================================
    # Snapshot API
    # ========================================

    def get_snapshot(self) -> List[Dict[str, Any]]:
        """Capture every object for undo or persistence."""
        return [obj.to_dict() for obj in self._objects.values()]

    def set_snapshot(self, snapshot: List[Dict[str, Any]]):
        """Replace the whole scene with a captured snapshot."""
        objects = [SceneObject.from_dict(data) for data in deepcopy(snapshot)]
        self._objects = {obj.uid: obj for obj in objects}
        # Drop dangling parent links from partial snapshots
        for obj in objects:
            if obj.parent_id is not None and obj.parent_id not in self._objects:
                obj.parent_id = None
        # Break parent cycles so every chain ends at a root
        for obj in objects:
            seen = {obj.uid}
            node = obj
            while node.parent_id is not None:
                if node.parent_id in seen:
                    self._logger.warning(f"Dropping cyclic parent link {node.uid} -> {node.parent_id}")
                    node.parent_id = None
                    break
                seen.add(node.parent_id)
                node = self._objects[node.parent_id]
