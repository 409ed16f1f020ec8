"""
Undo/redo stack of tool snapshots.

Each entry is one complete capture of the tool (scene objects plus array set
records) taken after a command finished. The entry at current_index is what
the tool shows right now; undo and redo move that index and hand out a copy
of the capture found there.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Callable, List


@dataclass
class HistoryEntry:
	state: Any
	description: str = ""


class HistoryManager:
	"""Bounded linear history of tool captures"""

	def __init__(self, max_history=50):
		"""
		Args:
			max_history: Oldest captures are dropped beyond this many
		"""
		self._logger = logging.getLogger('History')
		self.max_history = max_history
		self.history: List[HistoryEntry] = []
		self.current_index = -1  # -1 until the first capture
		self._listeners: List[Callable[[bool, bool], None]] = []

	def save_state(self, state_data, description=""):
		"""
		Record a capture after the current one

		Anything that was undone is discarded. The capture is deep-copied so
		later edits to the live tool cannot reach into history.
		"""
		del self.history[self.current_index + 1:]
		self.history.append(HistoryEntry(copy.deepcopy(state_data), description))

		overflow = len(self.history) - self.max_history
		if overflow > 0:
			del self.history[:overflow]
		self.current_index = len(self.history) - 1

		self._notify_listeners()
		self._logger.debug(f"Captured '{description}' ({self.current_index + 1}/{len(self.history)})")

	def _step(self, offset):
		self.current_index += offset
		self._notify_listeners()
		entry = self.history[self.current_index]
		self._logger.debug(f"Moved to '{entry.description}' ({self.current_index + 1}/{len(self.history)})")
		return copy.deepcopy(entry.state)

	def undo(self):
		"""Step back one capture; None when already at the oldest"""
		return self._step(-1) if self.can_undo() else None

	def redo(self):
		"""Step forward one capture; None when already at the newest"""
		return self._step(1) if self.can_redo() else None

	def can_undo(self):
		return self.current_index > 0

	def can_redo(self):
		return self.current_index < len(self.history) - 1

	def clear(self):
		self.history.clear()
		self.current_index = -1
		self._notify_listeners()

	def add_listener(self, callback):
		"""Register callback(can_undo, can_redo), called after every move"""
		self._listeners.append(callback)

	def remove_listener(self, callback):
		if callback in self._listeners:
			self._listeners.remove(callback)

	def _notify_listeners(self):
		can_undo, can_redo = self.can_undo(), self.can_redo()
		for callback in list(self._listeners):
			try:
				callback(can_undo, can_redo)
			except Exception as e:
				self._logger.warning(f"History listener failed: {e}")

	def _description_at(self, index):
		if 0 <= index < len(self.history):
			return self.history[index].description
		return ""

	def get_current_description(self):
		return self._description_at(self.current_index)

	def get_undo_description(self):
		"""Label of the command undo would revert"""
		return self._description_at(self.current_index) if self.can_undo() else ""

	def get_redo_description(self):
		"""Label of the command redo would reapply"""
		return self._description_at(self.current_index + 1) if self.can_redo() else ""
