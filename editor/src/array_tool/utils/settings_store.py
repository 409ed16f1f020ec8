"""String-keyed persistent settings store.

Holds string values under string keys and writes them as one JSON document.
Without a path the store lives purely in memory, which is what tests use.
"""

import os
import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union


class SettingsStore:
	"""Persistent key -> string store backed by a JSON file"""

	def __init__(self, path: Optional[Union[str, Path]] = None):
		"""
		Initialize the store, loading any existing file

		Args:
			path: JSON file to load from and save to, or None for memory only
		"""
		self._logger = logging.getLogger('SettingsStore')
		self.path = Path(path) if path is not None else None
		self._values: Dict[str, str] = {}
		self._load()

	def _load(self):
		"""Load values from disk; unreadable or malformed files give an empty store"""
		if self.path is None or not self.path.exists():
			return
		try:
			with open(self.path, 'r', encoding='utf-8') as f:
				data = json.load(f)
		except (OSError, ValueError) as e:
			self._logger.warning(f"Ignoring unreadable settings file {self.path}: {e}")
			return

		if not isinstance(data, dict):
			self._logger.warning(f"Ignoring settings file {self.path}: expected an object")
			return

		# Only string values are meaningful; skip anything else
		self._values = {str(k): v for k, v in data.items() if isinstance(v, str)}

	def save(self):
		"""Write all values to disk (no-op for memory-only stores)"""
		if self.path is None:
			return
		os.makedirs(self.path.parent, exist_ok=True)
		with open(self.path, 'w', encoding='utf-8') as f:
			json.dump(self._values, f, indent=2)
		self._logger.debug(f"Saved {len(self._values)} keys to {self.path}")

	def get_string(self, key: str, default: str = "") -> str:
		return self._values.get(key, default)

	def set_string(self, key: str, value: str):
		self._values[key] = value

	def has_key(self, key: str) -> bool:
		return key in self._values

	def delete_key(self, key: str):
		self._values.pop(key, None)
