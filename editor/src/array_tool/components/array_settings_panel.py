"""
Advanced Array Tool - Array Settings Panel

Form editing one ArraySettings: prefab, layout mode, the active mode's
geometry, and the shared per-instance modifiers. Emits settings_changed on
every edit so the window can refresh the preview.
"""

from PyQt5.QtWidgets import (QWidget, QVBoxLayout, QHBoxLayout, QFormLayout, QLabel,
                             QComboBox, QSpinBox, QDoubleSpinBox, QCheckBox, QGroupBox)
from PyQt5.QtCore import pyqtSignal

from array_tool.models.array_set import ArrayMode, ArraySettings, GridParams, CircleParams
from array_tool.models.transform import Vec3
from array_tool.constants import MAX_COUNT, MAX_DISTANCE


def _make_count_spin(value):
    spin = QSpinBox()
    spin.setRange(0, MAX_COUNT)  # Counts are never negative
    spin.setValue(value)
    return spin


class ExactDoubleSpinBox(QDoubleSpinBox):
    """Double spin box that hands back a loaded value unrounded.

    The display shows DISPLAY_DECIMALS places. Until the user edits the field,
    exact_value() returns what set_exact() was given.
    """

    DISPLAY_DECIMALS = 3

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setDecimals(self.DISPLAY_DECIMALS)
        self._exact = None  # (shown value, loaded value)

    def set_exact(self, value: float):
        self.setValue(value)
        self._exact = (self.value(), float(value))

    def exact_value(self) -> float:
        if self._exact is not None and self._exact[0] == self.value():
            return self._exact[1]
        return self.value()


def _make_distance_spin(value, minimum=-MAX_DISTANCE):
    spin = ExactDoubleSpinBox()
    spin.setRange(minimum, MAX_DISTANCE)
    spin.setSingleStep(0.1)
    spin.set_exact(value)
    return spin


class Vec3Field(QWidget):
    """Three spin boxes editing an x/y/z triple."""

    value_changed = pyqtSignal()

    def __init__(self, value=None, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.spins = []
        for axis in ('X', 'Y', 'Z'):
            layout.addWidget(QLabel(axis))
            spin = _make_distance_spin(0.0)
            spin.valueChanged.connect(self.value_changed)
            layout.addWidget(spin)
            self.spins.append(spin)

        if value is not None:
            self.set_value(value)

    def value(self) -> Vec3:
        return Vec3(*(spin.exact_value() for spin in self.spins))

    def set_value(self, value: Vec3):
        for spin, component in zip(self.spins, value):
            spin.blockSignals(True)
            spin.set_exact(component)
            spin.blockSignals(False)
        self.value_changed.emit()


class ArraySettingsPanel(QWidget):
    """Settings form for the array set being created or edited"""

    settings_changed = pyqtSignal()

    def __init__(self, prefabs, parent=None):
        """
        Args:
            prefabs: PrefabLibrary offered in the prefab combo box
            parent: Parent widget
        """
        super().__init__(parent)
        self.prefabs = prefabs
        self._updating = False  # Suppresses settings_changed during set_settings
        self._setup_ui()
        self.set_settings(ArraySettings())

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        title = QLabel("Array Settings")
        title.setStyleSheet("font-weight: bold;")
        layout.addWidget(title)

        form = QFormLayout()

        self.prefab_combo = QComboBox()
        self.prefab_combo.addItem("(None)", None)
        for prefab in self.prefabs:
            self.prefab_combo.addItem(prefab.name, prefab.asset_id)
        self.prefab_combo.currentIndexChanged.connect(self._emit_changed)
        form.addRow("Prefab", self.prefab_combo)

        self.mode_combo = QComboBox()
        self.mode_combo.addItem("Grid", ArrayMode.GRID.value)
        self.mode_combo.addItem("Circle", ArrayMode.CIRCLE.value)
        self.mode_combo.currentIndexChanged.connect(self._on_mode_changed)
        form.addRow("Mode", self.mode_combo)
        layout.addLayout(form)

        # Grid geometry
        self.grid_group = QGroupBox("Grid")
        grid_form = QFormLayout(self.grid_group)
        defaults = GridParams()
        self.rows_spin = _make_count_spin(defaults.rows)
        self.columns_spin = _make_count_spin(defaults.columns)
        self.layers_spin = _make_count_spin(defaults.layers)
        self.spacing_spin = _make_distance_spin(defaults.spacing)
        grid_form.addRow("Rows", self.rows_spin)
        grid_form.addRow("Columns", self.columns_spin)
        grid_form.addRow("Layers", self.layers_spin)
        grid_form.addRow("Spacing", self.spacing_spin)
        layout.addWidget(self.grid_group)

        # Circle geometry
        self.circle_group = QGroupBox("Circle")
        circle_form = QFormLayout(self.circle_group)
        circle_defaults = CircleParams()
        self.count_spin = _make_count_spin(circle_defaults.object_count)
        self.radius_spin = _make_distance_spin(circle_defaults.radius)
        circle_form.addRow("Number of Objects", self.count_spin)
        circle_form.addRow("Radius", self.radius_spin)
        layout.addWidget(self.circle_group)

        for spin in (self.rows_spin, self.columns_spin, self.layers_spin, self.spacing_spin,
                     self.count_spin, self.radius_spin):
            spin.valueChanged.connect(self._emit_changed)

        # Shared modifiers
        modifiers_form = QFormLayout()
        self.position_offset_field = Vec3Field()
        self.rotation_offset_field = Vec3Field()
        self.scale_multiplier_field = Vec3Field(Vec3.one())
        self.randomize_rotation_check = QCheckBox()
        self.randomize_scale_check = QCheckBox()
        modifiers_form.addRow("Position Offset", self.position_offset_field)
        modifiers_form.addRow("Rotation Offset", self.rotation_offset_field)
        modifiers_form.addRow("Randomize Rotation", self.randomize_rotation_check)
        modifiers_form.addRow("Scale Multiplier", self.scale_multiplier_field)
        modifiers_form.addRow("Randomize Scale", self.randomize_scale_check)
        layout.addLayout(modifiers_form)

        for field in (self.position_offset_field, self.rotation_offset_field, self.scale_multiplier_field):
            field.value_changed.connect(self._emit_changed)
        self.randomize_rotation_check.toggled.connect(self._emit_changed)
        self.randomize_scale_check.toggled.connect(self._emit_changed)

        self._update_mode_visibility()

    # ========================================
    # Settings <-> widgets
    # ========================================

    def current_mode(self) -> ArrayMode:
        return ArrayMode(self.mode_combo.currentData())

    def get_settings(self) -> ArraySettings:
        """Build ArraySettings from the current form values"""
        return ArraySettings(
            prefab_id=self.prefab_combo.currentData(),
            mode=self.current_mode(),
            grid=GridParams(
                rows=self.rows_spin.value(),
                columns=self.columns_spin.value(),
                layers=self.layers_spin.value(),
                spacing=self.spacing_spin.exact_value(),
            ),
            circle=CircleParams(
                object_count=self.count_spin.value(),
                radius=self.radius_spin.exact_value(),
            ),
            position_offset=self.position_offset_field.value(),
            rotation_offset=self.rotation_offset_field.value(),
            scale_multiplier=self.scale_multiplier_field.value(),
            randomize_rotation=self.randomize_rotation_check.isChecked(),
            randomize_scale=self.randomize_scale_check.isChecked(),
        )

    def set_settings(self, settings: ArraySettings):
        """Load settings into the form (emits settings_changed once)"""
        self._updating = True
        try:
            prefab_index = self.prefab_combo.findData(settings.prefab_id)
            self.prefab_combo.setCurrentIndex(max(0, prefab_index))
            self.mode_combo.setCurrentIndex(self.mode_combo.findData(settings.mode.value))

            self.rows_spin.setValue(settings.grid.rows)
            self.columns_spin.setValue(settings.grid.columns)
            self.layers_spin.setValue(settings.grid.layers)
            self.spacing_spin.set_exact(settings.grid.spacing)
            self.count_spin.setValue(settings.circle.object_count)
            self.radius_spin.set_exact(settings.circle.radius)

            self.position_offset_field.set_value(settings.position_offset)
            self.rotation_offset_field.set_value(settings.rotation_offset)
            self.scale_multiplier_field.set_value(settings.scale_multiplier)
            self.randomize_rotation_check.setChecked(settings.randomize_rotation)
            self.randomize_scale_check.setChecked(settings.randomize_scale)
        finally:
            self._updating = False

        self._update_mode_visibility()
        self.settings_changed.emit()

    def _on_mode_changed(self, index):
        self._update_mode_visibility()
        self._emit_changed()

    def _update_mode_visibility(self):
        is_grid = self.current_mode() == ArrayMode.GRID
        self.grid_group.setVisible(is_grid)
        self.circle_group.setVisible(not is_grid)

    def _emit_changed(self, *args):
        if not self._updating:
            self.settings_changed.emit()
