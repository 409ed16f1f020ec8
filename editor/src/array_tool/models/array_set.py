"""
Advanced Array Tool - Array Set Data Model

An ArraySet is one named, editable pattern: the generation parameters that
describe it plus the identities of the scene objects it spawned last time.

The child record exists only so the objects can be cleaned up on update or
delete. Placements are always recomputed from the parameters, never read back
from live objects.

Usage:
    settings = ArraySettings(prefab_id='primitive_cube', mode=ArrayMode.CIRCLE)
    settings.circle.object_count = 8

    array_set = ArraySet('Array_Set_1', settings, root_id=root.uid)
    array_set.add_child(obj.uid)

    record = array_set.to_dict()
    restored = ArraySet.from_dict(record)
"""

import math
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from array_tool.models.transform import Vec3
from array_tool.constants import (
    DEFAULT_ROWS, DEFAULT_COLUMNS, DEFAULT_LAYERS, DEFAULT_SPACING,
    DEFAULT_OBJECT_COUNT, DEFAULT_RADIUS,
    DEFAULT_POSITION_OFFSET, DEFAULT_ROTATION_OFFSET, DEFAULT_SCALE_MULTIPLIER,
)


class ArrayMode(Enum):
    """Layout mode of an array set."""
    GRID = 'grid'
    CIRCLE = 'circle'


def _clamp_count(value) -> int:
    """Counts are never negative; anything below zero becomes zero."""
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"count must be finite, got {value}")
    return max(0, int(value))


def _optional_id(value, name: str) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise TypeError(f"{name} must be a string or null, got {type(value).__name__}")
    return value


def _finite(value, name: str) -> float:
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value}")
    return value


@dataclass
class GridParams:
    """Grid geometry: layers x rows x columns, evenly spaced.

    Negative spacing mirrors the pattern and is allowed.
    """
    rows: int = DEFAULT_ROWS
    columns: int = DEFAULT_COLUMNS
    layers: int = DEFAULT_LAYERS
    spacing: float = DEFAULT_SPACING

    def __post_init__(self):
        self.rows = _clamp_count(self.rows)
        self.columns = _clamp_count(self.columns)
        self.layers = _clamp_count(self.layers)
        self.spacing = _finite(self.spacing, 'spacing')

    @property
    def count(self) -> int:
        return self.rows * self.columns * self.layers


@dataclass
class CircleParams:
    """Ring geometry: object_count instances on a circle of the given radius."""
    object_count: int = DEFAULT_OBJECT_COUNT
    radius: float = DEFAULT_RADIUS

    def __post_init__(self):
        self.object_count = _clamp_count(self.object_count)
        self.radius = _finite(self.radius, 'radius')

    @property
    def count(self) -> int:
        return self.object_count


@dataclass
class ArraySettings:
    """Full generation parameters of an array set.

    Both mode parameter blocks are kept so switching modes in the form does
    not lose the values of the other mode.
    """
    prefab_id: Optional[str] = None
    mode: ArrayMode = ArrayMode.GRID
    grid: GridParams = field(default_factory=GridParams)
    circle: CircleParams = field(default_factory=CircleParams)
    position_offset: Vec3 = field(default_factory=lambda: Vec3(*DEFAULT_POSITION_OFFSET))
    rotation_offset: Vec3 = field(default_factory=lambda: Vec3(*DEFAULT_ROTATION_OFFSET))
    scale_multiplier: Vec3 = field(default_factory=lambda: Vec3(*DEFAULT_SCALE_MULTIPLIER))
    randomize_rotation: bool = False
    randomize_scale: bool = False

    @property
    def mode_params(self) -> Union[GridParams, CircleParams]:
        """Parameter block for the active mode."""
        if self.mode == ArrayMode.GRID:
            return self.grid
        return self.circle

    def copy(self) -> 'ArraySettings':
        return deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'prefab_id': self.prefab_id,
            'mode': self.mode.value,
            'rows': self.grid.rows,
            'columns': self.grid.columns,
            'layers': self.grid.layers,
            'spacing': self.grid.spacing,
            'object_count': self.circle.object_count,
            'radius': self.circle.radius,
            'position_offset': self.position_offset.to_list(),
            'rotation_offset': self.rotation_offset.to_list(),
            'scale_multiplier': self.scale_multiplier.to_list(),
            'randomize_rotation': self.randomize_rotation,
            'randomize_scale': self.randomize_scale,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ArraySettings':
        """Rebuild settings from a persisted record.

        Missing keys fall back to defaults.

        Raises:
            ValueError: If the mode is unknown or a number is invalid
            TypeError: If a field has the wrong shape
        """
        return cls(
            prefab_id=_optional_id(data.get('prefab_id'), 'prefab_id'),
            mode=ArrayMode(data.get('mode', ArrayMode.GRID.value)),
            grid=GridParams(
                rows=data.get('rows', DEFAULT_ROWS),
                columns=data.get('columns', DEFAULT_COLUMNS),
                layers=data.get('layers', DEFAULT_LAYERS),
                spacing=data.get('spacing', DEFAULT_SPACING),
            ),
            circle=CircleParams(
                object_count=data.get('object_count', DEFAULT_OBJECT_COUNT),
                radius=data.get('radius', DEFAULT_RADIUS),
            ),
            position_offset=Vec3.from_seq(data.get('position_offset', DEFAULT_POSITION_OFFSET)),
            rotation_offset=Vec3.from_seq(data.get('rotation_offset', DEFAULT_ROTATION_OFFSET)),
            scale_multiplier=Vec3.from_seq(data.get('scale_multiplier', DEFAULT_SCALE_MULTIPLIER)),
            randomize_rotation=bool(data.get('randomize_rotation', False)),
            randomize_scale=bool(data.get('randomize_scale', False)),
        )


class ArraySet:
    """One generated pattern and the objects it currently owns.

    Properties:
        name: Display label, also used as the root object's name
        settings: Owned copy of the generation parameters
        root_id: UUID of the container object parenting every instance
        child_ids: Ordered UUIDs of spawned instances (read-only view)
    """

    def __init__(self, name: str, settings: Optional[ArraySettings] = None,
                 root_id: Optional[str] = None, child_ids: Optional[List[str]] = None):
        self.name = name
        self.settings = settings.copy() if settings else ArraySettings()
        self.root_id = root_id
        self._child_ids = list(child_ids) if child_ids else []

    def __repr__(self):
        return (f"ArraySet(name={self.name!r}, mode={self.settings.mode.value}, "
                f"root_id={self.root_id!r}, children={len(self._child_ids)})")

    @property
    def child_ids(self) -> Tuple[str, ...]:
        return tuple(self._child_ids)

    def update_settings(self, settings: ArraySettings):
        """Replace the stored parameters with a copy of the given ones."""
        self.settings = settings.copy()

    def add_child(self, uid: str):
        self._child_ids.append(uid)

    def clear_child_records(self):
        self._child_ids.clear()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'root_id': self.root_id,
            'child_ids': list(self._child_ids),
            'settings': self.settings.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ArraySet':
        """Rebuild an array set from a persisted record.

        Raises:
            KeyError: If the record has no name
            ValueError, TypeError: If the settings are malformed
        """
        child_ids = data.get('child_ids') or []
        if not isinstance(child_ids, list):
            raise TypeError(f"child_ids must be a list, got {type(child_ids).__name__}")
        return cls(
            name=str(data['name']),
            settings=ArraySettings.from_dict(data.get('settings') or {}),
            root_id=_optional_id(data.get('root_id'), 'root_id'),
            child_ids=[str(uid) for uid in child_ids],
        )
