"""Advanced Array Tool - grid and circle prefab arrays for a 3D scene editor."""

__version__ = "0.1.0"
