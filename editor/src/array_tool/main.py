import sys
import argparse
import logging

import numpy as np

# PyQt5 import/s
from PyQt5 import QtWidgets
from PyQt5.QtWidgets import (QMainWindow, QWidget, QHBoxLayout, QVBoxLayout, QPushButton,
                             QScrollArea, QMessageBox, QLabel, QAction)
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QPalette, QColor, QKeySequence

# Component imports
from array_tool.components import ArraySetListWidget, ArraySettingsPanel, PreviewWidget

# Model imports
from array_tool.models import Scene, PrefabLibrary, Vec3

# Service imports
from array_tool.services.array_set_controller import ArraySetController
from array_tool.services.array_set_store import ArraySetStore
from array_tool.services.placement_engine import generate_placements
from array_tool.services.instance_compositor import RandomSource, composite_transform

# Utility imports
from array_tool.utils.history_manager import HistoryManager
from array_tool.utils.logger import loggerRaise, set_main_window
from array_tool.utils.path_resolver import get_settings_path
from array_tool.utils.settings_store import SettingsStore

from array_tool.constants import MAX_HISTORY_ENTRIES, MAX_PREVIEW_PLACEMENTS, PREVIEW_RANDOM_SEED

# Mixin imports
from array_tool.window.config_mixin import ConfigMixin
from array_tool.window.history_mixin import HistoryMixin


# Fusion style colors: (role, color)
DARK_PALETTE = (
    (QPalette.Window, QColor(53, 53, 53)),
    (QPalette.WindowText, Qt.white),
    (QPalette.Base, QColor(25, 25, 25)),
    (QPalette.AlternateBase, QColor(53, 53, 53)),
    (QPalette.Text, Qt.white),
    (QPalette.Button, QColor(53, 53, 53)),
    (QPalette.ButtonText, Qt.white),
    (QPalette.Highlight, QColor(42, 130, 218)),
    (QPalette.HighlightedText, Qt.black),
)


class ArrayToolWindow(ConfigMixin, HistoryMixin, QMainWindow):
    def __init__(self, settings_store=None, random_source=None, prefabs=None):
        """
        Args:
            settings_store: Store for persisted state (user settings file if None)
            random_source: Source for randomized modifiers (process-wide default if None)
            prefabs: Prefabs offered in the form (built-in library if None)
        """
        super().__init__()
        self.setWindowTitle("Advanced Array Tool")
        self.resize(900, 640)

        # Scene and the collection of array sets living in it
        self.scene = Scene()
        self.prefabs = prefabs if prefabs is not None else PrefabLibrary.builtin()
        self.settings_store = settings_store if settings_store is not None else SettingsStore(get_settings_path())
        self.controller = ArraySetController(
            self.scene, self.prefabs,
            random_source=random_source,
            store=ArraySetStore(self.settings_store),
        )

        # Index of the set being edited, -1 when the form creates a new one
        self.selected_index = -1

        # Undo stack of whole-tool captures
        self.history_manager = HistoryManager(max_history=MAX_HISTORY_ENTRIES)
        self.history_manager.add_listener(self._on_history_changed)

        # Set while a capture is being restored
        self._is_applying_history = False

        # Error dialogs from loggerRaise are parented to this window
        set_main_window(self)

        self._setup_ui()
        self._setup_menu()

        self._load_tool_state()
        self._refresh_array_set_list()
        self._refresh_buttons()
        self._update_preview()

        # Opening state is the bottom of the undo stack
        self.history_manager.clear()
        self._save_state("Open Array Tool")

    # ========================================
    # UI setup
    # ========================================

    def _setup_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        layout = QHBoxLayout(central)

        # Left: array set list and the form
        left_scroll = QScrollArea()
        left_scroll.setWidgetResizable(True)
        left_content = QWidget()
        left_layout = QVBoxLayout(left_content)

        self.array_set_list = ArraySetListWidget()
        self.array_set_list.on_create_requested = self._create_array_set
        self.array_set_list.on_edit_requested = self._on_edit_requested
        self.array_set_list.on_delete_requested = self._on_delete_requested
        self.array_set_list.on_rename_requested = self._on_rename_requested
        left_layout.addWidget(self.array_set_list)

        self.settings_panel = ArraySettingsPanel(self.prefabs)
        self.settings_panel.settings_changed.connect(self._update_preview)
        left_layout.addWidget(self.settings_panel)

        button_layout = QHBoxLayout()
        self.generate_btn = QPushButton("Generate New Array Set")
        self.generate_btn.clicked.connect(self._on_generate_clicked)
        button_layout.addWidget(self.generate_btn)

        self.cancel_btn = QPushButton("Cancel Editing")
        self.cancel_btn.clicked.connect(self._cancel_editing)
        button_layout.addWidget(self.cancel_btn)
        left_layout.addLayout(button_layout)

        self.cleanup_btn = QPushButton("Cleanup All Array Sets")
        self.cleanup_btn.clicked.connect(self._on_cleanup_clicked)
        left_layout.addWidget(self.cleanup_btn)
        left_layout.addStretch()

        left_scroll.setWidget(left_content)
        layout.addWidget(left_scroll, stretch=1)

        # Right: top-down preview of the form
        preview_layout = QVBoxLayout()
        preview_label = QLabel("Preview (top-down)")
        preview_label.setStyleSheet("font-weight: bold;")
        preview_layout.addWidget(preview_label)
        self.preview = PreviewWidget()
        preview_layout.addWidget(self.preview)
        preview_layout.addStretch()
        layout.addLayout(preview_layout)

        # Status bar: last action on the left, collection stats on the right
        self.status_left = QLabel("Ready")
        self.status_right = QLabel("")
        self.statusBar().addWidget(self.status_left, 1)
        self.statusBar().addPermanentWidget(self.status_right)

    def _setup_menu(self):
        edit_menu = self.menuBar().addMenu("&Edit")

        self.undo_action = QAction("Undo", self)
        self.undo_action.setShortcut(QKeySequence.Undo)
        self.undo_action.triggered.connect(self.undo)
        self.undo_action.setEnabled(False)
        edit_menu.addAction(self.undo_action)

        self.redo_action = QAction("Redo", self)
        self.redo_action.setShortcut(QKeySequence.Redo)
        self.redo_action.triggered.connect(self.redo)
        self.redo_action.setEnabled(False)
        edit_menu.addAction(self.redo_action)

    # ========================================
    # Refresh
    # ========================================

    def _refresh_array_set_list(self):
        self.array_set_list.rebuild(self.controller.array_sets, self.selected_index)

    def _refresh_buttons(self):
        editing = self.selected_index >= 0
        self.generate_btn.setText("Update Array Set" if editing else "Generate New Array Set")
        self.cancel_btn.setVisible(editing)
        self._update_status_bar()

    def _update_preview(self):
        """Preview the form's placements with the same compositing as spawning"""
        try:
            settings = self.settings_panel.get_settings()
            count = settings.mode_params.count
            if count > MAX_PREVIEW_PLACEMENTS:
                self.preview.show_message(f"{count} placements, too many to preview")
                return

            prefab = self.prefabs.get(settings.prefab_id)
            prefab_scale = prefab.scale if prefab is not None else Vec3.one()

            source = RandomSource(np.random.default_rng(PREVIEW_RANDOM_SEED))
            placements = generate_placements(settings.mode, settings.mode_params)
            self.preview.set_transforms(
                [composite_transform(p, settings, prefab_scale, source) for p in placements])
        except Exception as e:
            loggerRaise(e, "Error updating preview")

    # ========================================
    # Commands
    # ========================================

    def _on_generate_clicked(self):
        if self.selected_index == -1:
            self._create_array_set()
        else:
            self._update_selected_array_set()

    def _create_array_set(self):
        """Create a set from the form and select it"""
        try:
            array_set = self.controller.create(self.settings_panel.get_settings())
            if array_set is None:
                self.statusBar().showMessage("Select a prefab to generate an array set", 3000)
                return

            self.selected_index = len(self.controller) - 1
            self._save_state("Create Array Set")
            self._refresh_array_set_list()
            self._refresh_buttons()
        except Exception as e:
            loggerRaise(e, "Error creating array set")

    def _update_selected_array_set(self):
        try:
            if not self.controller.update_at(self.selected_index, self.settings_panel.get_settings()):
                return
            self._save_state("Update Array Set")
            self._refresh_array_set_list()
            self._refresh_buttons()
        except Exception as e:
            loggerRaise(e, "Error updating array set")

    def _cancel_editing(self):
        self.selected_index = -1
        self._refresh_array_set_list()
        self._refresh_buttons()

    def _on_edit_requested(self, index):
        """Select a set and load its settings into the form"""
        array_set = self.controller.get(index)
        if array_set is None:
            return
        self.selected_index = index
        self.settings_panel.set_settings(array_set.settings)
        self._refresh_array_set_list()
        self._refresh_buttons()

    def _on_delete_requested(self, index):
        try:
            if not self.controller.delete_at(index):
                return

            if self.selected_index == index:
                self.selected_index = -1
            elif self.selected_index > index:
                self.selected_index -= 1

            self._save_state("Delete Array Set")
            self._refresh_array_set_list()
            self._refresh_buttons()
        except Exception as e:
            loggerRaise(e, "Error deleting array set")

    def _on_rename_requested(self, index, name):
        try:
            array_set = self.controller.get(index)
            if array_set is None or array_set.name == name:
                return
            self.controller.rename(array_set, name)
            self._save_state("Rename Array Set")
        except Exception as e:
            loggerRaise(e, "Error renaming array set")

    def _confirm_cleanup(self):
        reply = QMessageBox.question(
            self,
            "Cleanup Confirmation",
            "Are you sure you want to delete all array sets?",
            QMessageBox.Yes | QMessageBox.No,
            QMessageBox.No
        )
        return reply == QMessageBox.Yes

    def _on_cleanup_clicked(self):
        """Delete every array set after confirmation"""
        try:
            if not self._confirm_cleanup():
                return
            self.controller.delete_all()
            self.selected_index = -1
            self._save_state("Cleanup All Array Sets")
            self._refresh_array_set_list()
            self._refresh_buttons()
        except Exception as e:
            loggerRaise(e, "Error cleaning up array sets")

    def closeEvent(self, event):
        self._save_tool_state()
        super().closeEvent(event)


def main(argv=None):
    """Main entry point for the Advanced Array Tool"""
    parser = argparse.ArgumentParser(
        description='Create and edit grid and circle arrays of prefab instances.',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging.',
    )
    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)  # Output to console
        ]
    )

    app = QtWidgets.QApplication(sys.argv[:1])

    app.setStyle("Fusion")
    palette = QPalette()
    for role, color in DARK_PALETTE:
        palette.setColor(role, color)
    app.setPalette(palette)

    window = ArrayToolWindow()
    window.show()
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
