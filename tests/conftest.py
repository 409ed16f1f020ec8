"""
Shared fixtures for Advanced Array Tool tests.

Provides scenes, prefab libraries, deterministic random sources and
controller fixtures.
"""
import sys
import os
import pytest

# Ensure editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'editor', 'src'))

# Widget tests run without a display
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')


# ── Random sources ──────────────────────────────────────────────────────

class StubRandomSource:
    """Returns queued values in order, then repeats the last one.

    Records every (low, high) range it was asked for.
    """

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def uniform(self, low, high):
        self.calls.append((low, high))
        if len(self.values) > 1:
            return self.values.pop(0)
        return self.values[0]


@pytest.fixture
def stub_random():
    """Factory for StubRandomSource instances"""
    return StubRandomSource


# ── Scene fixtures ──────────────────────────────────────────────────────

@pytest.fixture
def prefabs():
    """Built-in prefab library"""
    from array_tool.models import PrefabLibrary
    return PrefabLibrary.builtin()


@pytest.fixture
def scene():
    """Empty scene"""
    from array_tool.models import Scene
    return Scene()


@pytest.fixture
def controller(scene, prefabs):
    """Controller without persistence and with a constant random source"""
    from array_tool.services.array_set_controller import ArraySetController
    return ArraySetController(scene, prefabs, random_source=StubRandomSource([0.5]))


@pytest.fixture
def memory_store():
    """In-memory settings store (never touches disk)"""
    from array_tool.utils.settings_store import SettingsStore
    return SettingsStore()


@pytest.fixture
def grid_settings():
    """Cube grid: 2 rows x 3 columns, spacing 2"""
    from array_tool.models import ArraySettings, ArrayMode, GridParams
    return ArraySettings(
        prefab_id='primitive_cube',
        mode=ArrayMode.GRID,
        grid=GridParams(rows=2, columns=3, layers=1, spacing=2.0),
    )


@pytest.fixture
def circle_settings():
    """Cube ring: 4 objects, radius 5"""
    from array_tool.models import ArraySettings, ArrayMode, CircleParams
    return ArraySettings(
        prefab_id='primitive_cube',
        mode=ArrayMode.CIRCLE,
        circle=CircleParams(object_count=4, radius=5.0),
    )
