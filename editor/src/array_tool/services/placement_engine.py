"""Placement engine - maps array parameters to ordered placements.

Every layout mode returns the same array shape so callers never need to know
which mode produced it:

    Nx4 numpy array [[x, y, z, yaw], ...]

Positions are local to the array root. Yaw is in degrees about +Y and is the
only rotation a placement carries; per-instance offsets and randomization are
applied later by the instance compositor.

Output is a pure function of the parameters, so identical parameters always
give bit-identical arrays in the same order.
"""

import numpy as np

from array_tool.models.array_set import ArrayMode, GridParams, CircleParams

PLACEMENT_COLUMNS = 4  # x, y, z, yaw


def empty_placements() -> np.ndarray:
    return np.zeros((0, PLACEMENT_COLUMNS))


def generate_grid(params: GridParams) -> np.ndarray:
    """Generate a layered grid of placements.

    Iteration order is fixed: layers outermost, then rows, then columns.
    The instance at (layer=z, row=y, column=x) sits at
    (x * spacing, y * spacing, z * spacing).

    Args:
        params: Grid geometry

    Returns:
        Nx4 numpy array [[x, y, z, yaw], ...] with yaw always 0
    """
    rows, columns, layers = params.rows, params.columns, params.layers
    spacing = params.spacing

    if rows < 1 or columns < 1 or layers < 1:
        return empty_placements()

    placements = np.zeros((layers * rows * columns, PLACEMENT_COLUMNS))

    idx = 0
    for z in range(layers):
        for y in range(rows):
            for x in range(columns):
                placements[idx] = [x * spacing, y * spacing, z * spacing, 0.0]
                idx += 1

    return placements


def generate_circle(params: CircleParams) -> np.ndarray:
    """Generate placements evenly spaced on a ring in the XZ plane.

    Instance i sits at angle i * 2pi / count, at
    (cos(angle) * radius, 0, sin(angle) * radius), and is yawed by -angle so
    every instance faces along the ring's tangent.

    Args:
        params: Ring geometry

    Returns:
        Nx4 numpy array [[x, y, z, yaw], ...]
    """
    count = params.object_count
    radius = params.radius

    # Guards the division below
    if count < 1:
        return empty_placements()

    placements = np.zeros((count, PLACEMENT_COLUMNS))

    for i in range(count):
        angle = i * np.pi * 2 / count
        x = np.cos(angle) * radius
        z = np.sin(angle) * radius
        placements[i] = [x, 0.0, z, -np.rad2deg(angle)]

    return placements


def generate_placements(mode: ArrayMode, params) -> np.ndarray:
    """Generate placements for any layout mode.

    Args:
        mode: Layout mode
        params: GridParams for ArrayMode.GRID, CircleParams for ArrayMode.CIRCLE

    Returns:
        Nx4 numpy array [[x, y, z, yaw], ...]

    Raises:
        ValueError: If the mode is unknown
        TypeError: If params does not match the mode
    """
    if mode == ArrayMode.GRID:
        if not isinstance(params, GridParams):
            raise TypeError(f"Grid mode needs GridParams, got {type(params).__name__}")
        return generate_grid(params)
    elif mode == ArrayMode.CIRCLE:
        if not isinstance(params, CircleParams):
            raise TypeError(f"Circle mode needs CircleParams, got {type(params).__name__}")
        return generate_circle(params)
    raise ValueError(f"Unknown array mode: {mode}")
