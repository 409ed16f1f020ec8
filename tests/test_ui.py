"""
Tests for the tool window and its widgets.

Covers:
- ArraySetListWidget rows, callbacks and foldout
- ArraySettingsPanel form <-> ArraySettings
- PreviewWidget rendering
- ArrayToolWindow commands: generate, update, edit, cancel, delete,
  rename, cleanup, undo/redo, load on open and save on close
"""
import json
import pytest
from unittest.mock import MagicMock, patch

from PyQt5.QtWidgets import QMessageBox

from array_tool.models import ArrayMode, ArraySet, ArraySettings, CircleParams, Transform, Vec3
from array_tool.constants import SETTINGS_KEY_SCENE, SETTINGS_KEY_ARRAY_SETS


# ══════════════════════════════════════════════════════════════════════════
# Helpers
# ══════════════════════════════════════════════════════════════════════════

def _select_prefab(window, asset_id):
    combo = window.settings_panel.prefab_combo
    combo.setCurrentIndex(combo.findData(asset_id))


@pytest.fixture
def window(qtbot, memory_store, stub_random):
    from array_tool.main import ArrayToolWindow
    w = ArrayToolWindow(settings_store=memory_store, random_source=stub_random([1.0]))
    qtbot.addWidget(w)
    return w


# ══════════════════════════════════════════════════════════════════════════
# ArraySetListWidget
# ══════════════════════════════════════════════════════════════════════════

class TestArraySetList:

    @pytest.fixture
    def widget(self, qtbot):
        from array_tool.components import ArraySetListWidget
        widget = ArraySetListWidget()
        qtbot.addWidget(widget)
        widget.on_create_requested = MagicMock()
        widget.on_edit_requested = MagicMock()
        widget.on_delete_requested = MagicMock()
        widget.on_rename_requested = MagicMock()
        return widget

    def test_one_row_per_set(self, widget):
        widget.rebuild([ArraySet('A'), ArraySet('B')], selected_index=1)
        assert [row[0].text() for row in widget.rows] == ['A', 'B']
        assert widget.rows[1][1].isChecked()
        assert not widget.rows[0][1].isChecked()

    def test_rebuild_replaces_rows(self, widget):
        widget.rebuild([ArraySet('A'), ArraySet('B')])
        widget.rebuild([ArraySet('C')])
        assert len(widget.rows) == 1

    def test_buttons_report_index(self, widget):
        widget.rebuild([ArraySet('A'), ArraySet('B')])
        widget.rows[1][1].click()
        widget.rows[0][2].click()
        widget.create_btn.click()
        widget.on_edit_requested.assert_called_once_with(1)
        widget.on_delete_requested.assert_called_once_with(0)
        widget.on_create_requested.assert_called_once_with()

    def test_rename_reports_stripped_name(self, widget):
        widget.rebuild([ArraySet('A')])
        name_edit = widget.rows[0][0]
        name_edit.setText('  Fence  ')
        name_edit.editingFinished.emit()
        widget.on_rename_requested.assert_called_once_with(0, 'Fence')

    def test_blank_name_ignored(self, widget):
        widget.rebuild([ArraySet('A')])
        widget.rows[0][0].setText('   ')
        widget.rows[0][0].editingFinished.emit()
        widget.on_rename_requested.assert_not_called()

    def test_foldout_hides_rows(self, widget):
        widget.rebuild([ArraySet('A')])
        widget.foldout_btn.setChecked(False)
        assert not widget.is_expanded()
        assert widget.rows_container.isHidden()
        widget.foldout_btn.setChecked(True)
        assert not widget.rows_container.isHidden()


# ══════════════════════════════════════════════════════════════════════════
# ArraySettingsPanel
# ══════════════════════════════════════════════════════════════════════════

class TestArraySettingsPanel:

    @pytest.fixture
    def panel(self, qtbot, prefabs):
        from array_tool.components import ArraySettingsPanel
        panel = ArraySettingsPanel(prefabs)
        qtbot.addWidget(panel)
        return panel

    def test_defaults(self, panel):
        settings = panel.get_settings()
        assert settings.prefab_id is None
        assert settings == ArraySettings()

    def test_set_get_round_trip(self, panel):
        settings = ArraySettings(
            prefab_id='primitive_sphere',
            mode=ArrayMode.CIRCLE,
            circle=CircleParams(object_count=12, radius=7.5),
            position_offset=Vec3(1.0, 2.0, 3.0),
            rotation_offset=Vec3(0.0, 90.0, 0.0),
            scale_multiplier=Vec3(2.0, 2.0, 2.0),
            randomize_rotation=True,
        )
        panel.set_settings(settings)
        assert panel.get_settings() == settings

    def test_mode_switch_toggles_groups(self, panel):
        assert not panel.grid_group.isHidden()
        assert panel.circle_group.isHidden()
        panel.mode_combo.setCurrentIndex(panel.mode_combo.findData(ArrayMode.CIRCLE.value))
        assert panel.current_mode() == ArrayMode.CIRCLE
        assert panel.grid_group.isHidden()
        assert not panel.circle_group.isHidden()

    def test_edit_emits_settings_changed(self, panel):
        listener = MagicMock()
        panel.settings_changed.connect(listener)
        panel.rows_spin.setValue(4)
        panel.randomize_scale_check.setChecked(True)
        assert listener.call_count == 2

    def test_set_settings_emits_once(self, panel):
        listener = MagicMock()
        panel.settings_changed.connect(listener)
        panel.set_settings(ArraySettings(prefab_id='primitive_cube', mode=ArrayMode.CIRCLE))
        assert listener.call_count == 1

    def test_counts_cannot_go_negative(self, panel):
        panel.rows_spin.setValue(-3)
        assert panel.get_settings().grid.rows == 0

    def test_loaded_values_are_not_rounded(self, panel):
        settings = ArraySettings(position_offset=Vec3(0.0, 0.0, 1.23456))
        settings.grid.spacing = 0.12345
        panel.set_settings(settings)
        assert panel.spacing_spin.value() == pytest.approx(0.123)
        assert panel.get_settings() == settings

    def test_edited_value_replaces_loaded(self, panel):
        settings = ArraySettings()
        settings.circle.radius = 2.71828
        panel.set_settings(settings)
        panel.radius_spin.setValue(4.0)
        assert panel.get_settings().circle.radius == 4.0


# ══════════════════════════════════════════════════════════════════════════
# PreviewWidget
# ══════════════════════════════════════════════════════════════════════════

class TestPreviewWidget:

    def test_renders_transforms(self, qtbot):
        from array_tool.components import PreviewWidget
        preview = PreviewWidget()
        qtbot.addWidget(preview)
        preview.set_transforms([Transform(position=Vec3(float(i), 0.0, 0.0)) for i in range(3)])
        assert len(preview.transforms) == 3
        assert not preview.grab().isNull()

    def test_renders_empty(self, qtbot):
        from array_tool.components import PreviewWidget
        preview = PreviewWidget()
        qtbot.addWidget(preview)
        preview.set_transforms([])
        assert not preview.grab().isNull()

    def test_message_replaces_transforms(self, qtbot):
        from array_tool.components import PreviewWidget
        preview = PreviewWidget()
        qtbot.addWidget(preview)
        preview.set_transforms([Transform()])
        preview.show_message("Too many")
        assert preview.transforms == []
        assert preview.placeholder == "Too many"
        assert not preview.grab().isNull()


# ══════════════════════════════════════════════════════════════════════════
# ArrayToolWindow
# ══════════════════════════════════════════════════════════════════════════

class TestWindowCommands:

    def test_initial_state(self, window):
        assert window.selected_index == -1
        assert window.generate_btn.text() == "Generate New Array Set"
        assert window.cancel_btn.isHidden()
        assert not window.undo_action.isEnabled()

    def test_generate_without_prefab_does_nothing(self, window):
        window.generate_btn.click()
        assert len(window.controller) == 0
        assert len(window.scene) == 0

    def test_generate_creates_and_selects(self, window):
        _select_prefab(window, 'primitive_cube')
        window.settings_panel.rows_spin.setValue(2)
        window.settings_panel.columns_spin.setValue(3)
        window.generate_btn.click()

        assert len(window.controller) == 1
        assert len(window.controller.get(0).child_ids) == 6
        assert window.selected_index == 0
        assert window.generate_btn.text() == "Update Array Set"
        assert not window.cancel_btn.isHidden()
        assert window.undo_action.isEnabled()
        assert window.undo_action.text() == "Undo Create Array Set"

    def test_update_regenerates_selected(self, window):
        _select_prefab(window, 'primitive_cube')
        window.generate_btn.click()
        window.settings_panel.columns_spin.setValue(4)
        window.generate_btn.click()

        assert len(window.controller) == 1
        assert len(window.controller.get(0).child_ids) == 4
        assert len(window.scene) == 1 + 4

    def test_cancel_then_generate_creates_second(self, window):
        _select_prefab(window, 'primitive_cube')
        window.generate_btn.click()
        window.cancel_btn.click()
        assert window.selected_index == -1
        window.generate_btn.click()
        assert [s.name for s in window.controller.array_sets] == ['Array_Set_1', 'Array_Set_2']

    def test_edit_loads_settings(self, window):
        _select_prefab(window, 'primitive_cube')
        window.settings_panel.rows_spin.setValue(5)
        window.generate_btn.click()
        window.cancel_btn.click()
        window.settings_panel.set_settings(ArraySettings())

        window.array_set_list.rows[0][1].click()

        assert window.selected_index == 0
        assert window.settings_panel.get_settings().grid.rows == 5
        assert window.settings_panel.get_settings().prefab_id == 'primitive_cube'

    def test_delete_shifts_selection(self, window):
        _select_prefab(window, 'primitive_cube')
        for _ in range(3):
            window.array_set_list.create_btn.click()
        assert window.selected_index == 2

        window._on_delete_requested(0)
        assert window.selected_index == 1

        window._on_delete_requested(1)
        assert window.selected_index == -1
        assert len(window.controller) == 1

    def test_delete_after_selection_keeps_it(self, window):
        _select_prefab(window, 'primitive_cube')
        for _ in range(3):
            window.array_set_list.create_btn.click()
        window._on_edit_requested(0)
        window._on_delete_requested(2)
        assert window.selected_index == 0

    def test_rename_updates_root(self, window):
        _select_prefab(window, 'primitive_cube')
        window.generate_btn.click()
        name_edit = window.array_set_list.rows[0][0]
        name_edit.setText('Fence')
        name_edit.editingFinished.emit()

        array_set = window.controller.get(0)
        assert array_set.name == 'Fence'
        assert window.scene.get(array_set.root_id).name == 'Fence'
        assert window.history_manager.get_current_description() == "Rename Array Set"

    def test_unchanged_name_saves_no_history(self, window):
        _select_prefab(window, 'primitive_cube')
        window.generate_btn.click()
        entries = len(window.history_manager.history)
        window._on_rename_requested(0, 'Array_Set_1')
        assert len(window.history_manager.history) == entries

    def test_cleanup_requires_confirmation(self, window):
        _select_prefab(window, 'primitive_cube')
        window.generate_btn.click()

        with patch.object(QMessageBox, 'question', return_value=QMessageBox.No):
            window.cleanup_btn.click()
        assert len(window.controller) == 1

        with patch.object(QMessageBox, 'question', return_value=QMessageBox.Yes):
            window.cleanup_btn.click()
        assert len(window.controller) == 0
        assert len(window.scene) == 0
        assert window.selected_index == -1

    def test_preview_follows_form(self, window):
        assert len(window.preview.transforms) == 1
        window.settings_panel.rows_spin.setValue(3)
        window.settings_panel.layers_spin.setValue(2)
        assert len(window.preview.transforms) == 6

    def test_large_array_skips_preview(self, window):
        panel = window.settings_panel
        panel.columns_spin.setValue(200)
        assert len(window.preview.transforms) == 200
        panel.rows_spin.setValue(200)
        assert window.preview.transforms == []
        assert "40000" in window.preview.placeholder
        panel.rows_spin.setValue(1)
        assert len(window.preview.transforms) == 200

    def test_preview_does_not_touch_scene(self, window):
        _select_prefab(window, 'primitive_cube')
        window.settings_panel.rows_spin.setValue(4)
        assert len(window.scene) == 0


class TestWindowHistory:

    def test_undo_redo_create(self, window):
        _select_prefab(window, 'primitive_cube')
        window.generate_btn.click()
        child_ids = window.controller.get(0).child_ids

        window.undo()
        assert len(window.controller) == 0
        assert len(window.scene) == 0
        assert window.selected_index == -1

        window.redo()
        assert len(window.controller) == 1
        assert window.controller.get(0).child_ids == child_ids
        assert all(window.scene.is_alive(uid) for uid in child_ids)
        assert window.selected_index == 0

    def test_undo_delete_restores_set(self, window):
        _select_prefab(window, 'primitive_cube')
        window.generate_btn.click()
        window._on_delete_requested(0)

        window.undo_action.trigger()

        assert len(window.controller) == 1
        array_set = window.controller.get(0)
        assert window.scene.is_alive(array_set.root_id)
        assert len(window.controller.live_children(array_set)) == 1

    def test_update_after_undo_has_no_leaks(self, window):
        _select_prefab(window, 'primitive_cube')
        window.settings_panel.rows_spin.setValue(2)
        window.generate_btn.click()
        window.settings_panel.rows_spin.setValue(3)
        window.generate_btn.click()
        window.undo()

        window._on_edit_requested(0)
        window.generate_btn.click()
        assert len(window.scene) == 1 + 2


class TestWindowPersistence:

    def test_close_saves_scene_and_sets(self, window, memory_store):
        _select_prefab(window, 'primitive_cube')
        window.generate_btn.click()
        window.close()

        assert memory_store.has_key(SETTINGS_KEY_ARRAY_SETS)
        scene_records = json.loads(memory_store.get_string(SETTINGS_KEY_SCENE))
        assert len(scene_records) == 2

    def test_reopen_restores_state(self, qtbot, window, memory_store):
        from array_tool.main import ArrayToolWindow
        _select_prefab(window, 'primitive_cube')
        window.generate_btn.click()
        window.close()

        reopened = ArrayToolWindow(settings_store=memory_store)
        qtbot.addWidget(reopened)

        assert len(reopened.controller) == 1
        array_set = reopened.controller.get(0)
        assert len(reopened.controller.live_children(array_set)) == 1
        assert [row[0].text() for row in reopened.array_set_list.rows] == ['Array_Set_1']

    def test_malformed_scene_data_loads_empty(self, qtbot, memory_store):
        from array_tool.main import ArrayToolWindow
        memory_store.set_string(SETTINGS_KEY_SCENE, '{not json')
        w = ArrayToolWindow(settings_store=memory_store)
        qtbot.addWidget(w)
        assert len(w.scene) == 0
