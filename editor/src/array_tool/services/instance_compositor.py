"""Per-instance transform compositing.

Turns one engine placement into the final local transform of a spawned
instance by applying the array set's modifiers:

    position = placement position + position_offset
    rotation = yaw(placement) * euler(rotation_offset) [* random euler]
    scale    = prefab scale * scale_multiplier [* random per-axis factor]

Random draws go through a RandomSource so tests can substitute a
deterministic one. Rotation draws (x, y, z) always happen before scale
draws (x, y, z).
"""

import numpy as np

from array_tool.models.array_set import ArraySettings
from array_tool.models.transform import Vec3, Quaternion, Transform
from array_tool.constants import (
    RANDOM_ROTATION_MIN, RANDOM_ROTATION_MAX,
    RANDOM_SCALE_MIN, RANDOM_SCALE_MAX,
)


class RandomSource:
    """Uniform float source backed by a numpy Generator.

    Any object with a uniform(low, high) -> float method can stand in for it.
    """

    def __init__(self, rng: np.random.Generator = None):
        self._rng = rng if rng is not None else np.random.default_rng()

    def uniform(self, low: float, high: float) -> float:
        """Draw from [low, high)."""
        return float(self._rng.uniform(low, high))


# Process-wide source used when callers do not inject one
_default_source = RandomSource()


def default_random_source() -> RandomSource:
    return _default_source


def _random_rotation(random_source) -> Quaternion:
    # Independent per-axis Euler draws, not uniform on SO(3)
    x = random_source.uniform(RANDOM_ROTATION_MIN, RANDOM_ROTATION_MAX)
    y = random_source.uniform(RANDOM_ROTATION_MIN, RANDOM_ROTATION_MAX)
    z = random_source.uniform(RANDOM_ROTATION_MIN, RANDOM_ROTATION_MAX)
    return Quaternion.from_euler(x, y, z)


def _random_scale(random_source) -> Vec3:
    return Vec3(
        random_source.uniform(RANDOM_SCALE_MIN, RANDOM_SCALE_MAX),
        random_source.uniform(RANDOM_SCALE_MIN, RANDOM_SCALE_MAX),
        random_source.uniform(RANDOM_SCALE_MIN, RANDOM_SCALE_MAX),
    )


def composite_transform(placement, settings: ArraySettings, prefab_scale: Vec3,
                        random_source=None) -> Transform:
    """Compute the final local transform for one instance.

    Args:
        placement: One engine row [x, y, z, yaw]
        settings: Array settings holding the modifiers
        prefab_scale: Local scale of the freshly instantiated prefab
        random_source: Source for randomized modifiers (process-wide default if None)

    Returns:
        Transform to apply to the instance, relative to the array root
    """
    if random_source is None:
        random_source = _default_source

    x, y, z, yaw = (float(v) for v in placement[:4])

    position = Vec3(x, y, z) + settings.position_offset

    rotation = Quaternion.from_euler(0.0, yaw, 0.0) * Quaternion.from_euler(*settings.rotation_offset)
    if settings.randomize_rotation:
        rotation = rotation * _random_rotation(random_source)

    scale = prefab_scale.scaled(settings.scale_multiplier)
    if settings.randomize_scale:
        scale = scale.scaled(_random_scale(random_source))

    return Transform(position=position, rotation=rotation, scale=scale)
