"""Qt widgets for the array tool window."""

from .array_set_list import ArraySetListWidget
from .array_settings_panel import ArraySettingsPanel, Vec3Field
from .preview_widget import PreviewWidget

__all__ = ['ArraySetListWidget', 'ArraySettingsPanel', 'Vec3Field', 'PreviewWidget']
