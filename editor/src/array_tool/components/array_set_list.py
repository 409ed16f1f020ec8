"""
Advanced Array Tool - Array Set List Widget

Foldout listing every array set with an editable name, an Edit button that
selects the set for editing, and an X button that deletes it.
"""

from PyQt5.QtWidgets import (QWidget, QVBoxLayout, QHBoxLayout, QPushButton,
                             QLineEdit, QToolButton, QSizePolicy)
from PyQt5.QtCore import Qt


class ArraySetListWidget(QWidget):
	"""Widget showing the array set collection with inline actions"""

	def __init__(self, parent=None):
		super().__init__(parent)
		self.selected_index = -1
		self.rows = []  # List of (name_edit, edit_btn, delete_btn) tuples

		# Callbacks (set by parent)
		self.on_create_requested = None  # ()
		self.on_edit_requested = None    # (index)
		self.on_delete_requested = None  # (index)
		self.on_rename_requested = None  # (index, name)

		self._setup_ui()

	def _setup_ui(self):
		main_layout = QVBoxLayout(self)
		main_layout.setContentsMargins(0, 0, 0, 0)
		main_layout.setSpacing(2)

		header_layout = QHBoxLayout()
		self.foldout_btn = QToolButton()
		self.foldout_btn.setText("Array Sets")
		self.foldout_btn.setCheckable(True)
		self.foldout_btn.setChecked(True)
		self.foldout_btn.setToolButtonStyle(Qt.ToolButtonTextBesideIcon)
		self.foldout_btn.setArrowType(Qt.DownArrow)
		self.foldout_btn.setStyleSheet("QToolButton { border: none; font-weight: bold; }")
		self.foldout_btn.toggled.connect(self._on_foldout_toggled)
		header_layout.addWidget(self.foldout_btn)
		header_layout.addStretch()

		self.create_btn = QPushButton("Create New Array Set")
		self.create_btn.setFixedWidth(150)
		self.create_btn.clicked.connect(self._on_create_clicked)
		header_layout.addWidget(self.create_btn)
		main_layout.addLayout(header_layout)

		self.rows_container = QWidget()
		self.rows_layout = QVBoxLayout(self.rows_container)
		self.rows_layout.setContentsMargins(12, 0, 0, 0)  # Indent under the foldout
		self.rows_layout.setSpacing(2)
		main_layout.addWidget(self.rows_container)

	def _on_foldout_toggled(self, expanded):
		self.foldout_btn.setArrowType(Qt.DownArrow if expanded else Qt.RightArrow)
		self.rows_container.setVisible(expanded)

	def is_expanded(self):
		return self.foldout_btn.isChecked()

	def rebuild(self, array_sets, selected_index=-1):
		"""Rebuild one row per array set

		Args:
			array_sets: Sets in display order
			selected_index: Index of the set being edited, or -1
		"""
		self.selected_index = selected_index

		while self.rows_layout.count() > 0:
			item = self.rows_layout.takeAt(0)
			if item.widget():
				item.widget().deleteLater()
		self.rows.clear()

		for i, array_set in enumerate(array_sets):
			row = QWidget()
			row_layout = QHBoxLayout(row)
			row_layout.setContentsMargins(0, 0, 0, 0)

			name_edit = QLineEdit(array_set.name)
			name_edit.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
			name_edit.editingFinished.connect(lambda idx=i, w=name_edit: self._on_name_edited(idx, w))
			if i == selected_index:
				name_edit.setStyleSheet("font-weight: bold;")
			row_layout.addWidget(name_edit)

			edit_btn = QPushButton("Edit")
			edit_btn.setFixedWidth(60)
			edit_btn.setCheckable(True)
			edit_btn.setChecked(i == selected_index)
			edit_btn.clicked.connect(lambda checked, idx=i: self._on_edit_clicked(idx))
			row_layout.addWidget(edit_btn)

			delete_btn = QPushButton("X")
			delete_btn.setFixedWidth(20)
			delete_btn.clicked.connect(lambda checked, idx=i: self._on_delete_clicked(idx))
			row_layout.addWidget(delete_btn)

			self.rows_layout.addWidget(row)
			self.rows.append((name_edit, edit_btn, delete_btn))

	def _on_create_clicked(self):
		if self.on_create_requested:
			self.on_create_requested()

	def _on_edit_clicked(self, index):
		if self.on_edit_requested:
			self.on_edit_requested(index)

	def _on_delete_clicked(self, index):
		if self.on_delete_requested:
			self.on_delete_requested(index)

	def _on_name_edited(self, index, name_edit):
		name = name_edit.text().strip()
		if name and self.on_rename_requested:
			self.on_rename_requested(index, name)
