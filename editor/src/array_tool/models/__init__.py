"""
Advanced Array Tool - Data Models

Public API: ArraySet, ArraySettings, ArrayMode and the parameter blocks from
models.array_set; Scene, SceneObject, Prefab, PrefabLibrary from models.scene;
Vec3, Quaternion, Transform from models.transform.
"""

from .transform import Vec3, Quaternion, Transform
from .array_set import ArrayMode, GridParams, CircleParams, ArraySettings, ArraySet
from .scene import Prefab, PrefabLibrary, SceneObject, Scene

__all__ = [
    'Vec3', 'Quaternion', 'Transform',
    'ArrayMode', 'GridParams', 'CircleParams', 'ArraySettings', 'ArraySet',
    'Prefab', 'PrefabLibrary', 'SceneObject', 'Scene',
]
