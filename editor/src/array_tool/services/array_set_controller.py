"""
Advanced Array Tool - Array Set Lifecycle Controller

Owns the create / update / delete sequence of array sets against a Scene.

State of one set:
    Uninstantiated -> Live -> Live (regenerated) -> Deleted

Guarantees:
- update() destroys every previously spawned child before spawning again,
  so regenerating never accumulates or leaks objects
- After update or delete, a set's child record matches its live instances
- A missing prefab turns generation into a no-op, never an error
- Objects destroyed outside the tool are skipped during cleanup
- Index-based calls are bounds-checked and no-op on a bad index

Usage:
    controller = ArraySetController(scene, PrefabLibrary.builtin())
    array_set = controller.create(settings)
    controller.update(array_set, new_settings)
    controller.delete(array_set)
"""

import logging
from typing import Any, Dict, List, Optional

from array_tool.models.array_set import ArraySet, ArraySettings
from array_tool.models.scene import Scene, SceneObject, Prefab, PrefabLibrary
from array_tool.services.placement_engine import generate_placements
from array_tool.services.instance_compositor import composite_transform
from array_tool.services.array_set_store import ArraySetStore
from array_tool.constants import ARRAY_SET_NAME_FORMAT


class ArraySetController:
    """Lifecycle controller for the array set collection

    Properties:
        array_sets: Sets in display order (mutated only through this class)
        scene: Scene objects are spawned into
        prefabs: Library used to resolve each set's prefab_id
    """

    def __init__(self, scene: Scene, prefabs: PrefabLibrary, random_source=None,
                 store: Optional[ArraySetStore] = None):
        """
        Args:
            scene: Scene to spawn into
            prefabs: Library resolving prefab ids
            random_source: Source for randomized modifiers (process-wide default if None)
            store: If given, every mutation writes the collection back to it
        """
        self._logger = logging.getLogger('ArraySetController')
        self.scene = scene
        self.prefabs = prefabs
        self.random_source = random_source
        self.store = store
        self.array_sets: List[ArraySet] = []

    # ========================================
    # Queries
    # ========================================

    def __len__(self) -> int:
        return len(self.array_sets)

    def get(self, index: int) -> Optional[ArraySet]:
        """Get the set at an index, or None if out of range"""
        if 0 <= index < len(self.array_sets):
            return self.array_sets[index]
        return None

    def index_of(self, array_set: ArraySet) -> int:
        """Index of a set, or -1 if it is not in the collection"""
        for i, candidate in enumerate(self.array_sets):
            if candidate is array_set:
                return i
        return -1

    def live_children(self, array_set: ArraySet) -> List[SceneObject]:
        """Recorded children that are still alive in the scene"""
        children = []
        for uid in array_set.child_ids:
            obj = self.scene.get(uid)
            if obj is not None:
                children.append(obj)
        return children

    def next_name(self) -> str:
        return ARRAY_SET_NAME_FORMAT.format(index=len(self.array_sets) + 1)

    # ========================================
    # Lifecycle
    # ========================================

    def create(self, settings: ArraySettings, name: Optional[str] = None) -> Optional[ArraySet]:
        """Create a new array set and spawn its instances

        Args:
            settings: Generation parameters (copied)
            name: Set and root name (defaults to Array_Set_<n>)

        Returns:
            The new ArraySet, or None if the prefab is unset or unknown
        """
        prefab = self.prefabs.get(settings.prefab_id)
        if prefab is None:
            self._logger.debug(f"Create skipped, no prefab for id {settings.prefab_id!r}")
            return None

        name = name or self.next_name()
        root = self.scene.create_object(name)
        array_set = ArraySet(name, settings, root_id=root.uid)

        self._spawn(array_set, prefab)
        self.array_sets.append(array_set)
        self._persist()

        self._logger.debug(f"Created {array_set}")
        return array_set

    def update(self, array_set: ArraySet, settings: ArraySettings):
        """Replace a set's parameters and regenerate it in place

        The root object keeps its identity, name and transform. If the root
        was destroyed outside the tool a new one is created for the set.

        Args:
            array_set: Set to regenerate
            settings: New generation parameters (copied)
        """
        array_set.update_settings(settings)
        self.clear_children(array_set)

        if not self.scene.is_alive(array_set.root_id):
            self._logger.warning(f"Root of {array_set.name} is gone, creating a new one")
            array_set.root_id = self.scene.create_object(array_set.name).uid

        prefab = self.prefabs.get(array_set.settings.prefab_id)
        if prefab is not None:
            self._spawn(array_set, prefab)
        else:
            self._logger.debug(f"Update of {array_set.name} spawned nothing, no prefab")

        self._persist()

    def update_at(self, index: int, settings: ArraySettings) -> bool:
        """Update the set at an index; returns False for a bad index"""
        array_set = self.get(index)
        if array_set is None:
            return False
        self.update(array_set, settings)
        return True

    def clear_children(self, array_set: ArraySet) -> int:
        """Destroy every recorded child and empty the record

        Children already destroyed elsewhere are skipped. Calling this twice
        in a row does nothing the second time.

        Returns:
            Number of objects actually destroyed
        """
        destroyed = 0
        for uid in array_set.child_ids:
            if self.scene.destroy(uid):
                destroyed += 1
        array_set.clear_child_records()
        return destroyed

    def delete(self, array_set: ArraySet):
        """Destroy a set's children and root, then drop its record"""
        self.clear_children(array_set)
        self.scene.destroy(array_set.root_id)
        array_set.root_id = None

        index = self.index_of(array_set)
        if index >= 0:
            del self.array_sets[index]
        self._persist()

        self._logger.debug(f"Deleted {array_set.name}")

    def delete_at(self, index: int) -> bool:
        """Delete the set at an index; returns False for a bad index"""
        array_set = self.get(index)
        if array_set is None:
            return False
        self.delete(array_set)
        return True

    def delete_all(self):
        """Delete every array set"""
        for array_set in list(self.array_sets):
            self.delete(array_set)

    def rename(self, array_set: ArraySet, name: str):
        """Rename a set and its root object"""
        array_set.name = name
        self.scene.rename(array_set.root_id, name)
        self._persist()

    # ========================================
    # Snapshot API
    # ========================================

    def get_snapshot(self) -> List[Dict[str, Any]]:
        return [array_set.to_dict() for array_set in self.array_sets]

    def set_snapshot(self, snapshot: List[Dict[str, Any]]):
        """Replace the collection with captured records

        Does not touch the scene; restore the matching scene snapshot
        alongside it.
        """
        self.array_sets = [ArraySet.from_dict(record) for record in snapshot]
        self._persist()

    def load(self):
        """Replace the collection with whatever the attached store holds"""
        if self.store is None:
            return
        self.array_sets = self.store.load()
        self._logger.debug(f"Loaded {len(self.array_sets)} array sets")

    # ========================================
    # Internal
    # ========================================

    def _spawn(self, array_set: ArraySet, prefab: Prefab):
        """Instantiate one child per placement under the set's root"""
        settings = array_set.settings
        placements = generate_placements(settings.mode, settings.mode_params)

        for placement in placements:
            obj = self.scene.instantiate(prefab, parent_id=array_set.root_id)
            obj.transform = composite_transform(
                placement, settings, obj.local_scale, self.random_source)
            array_set.add_child(obj.uid)

    def _persist(self):
        if self.store is not None:
            self.store.save(self.array_sets)
