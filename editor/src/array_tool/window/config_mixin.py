"""Tool state persistence for ArrayToolWindow"""

import json
import logging

from array_tool.utils.logger import loggerRaise
from array_tool.constants import SETTINGS_KEY_SCENE

_logger = logging.getLogger('ArrayToolWindow')


class ConfigMixin:
	"""Loads the scene and array sets when the window opens, saves them on close"""

	def _load_tool_state(self):
		"""Restore the scene, then the array sets that reference it"""
		try:
			scene_text = self.settings_store.get_string(SETTINGS_KEY_SCENE, "")
			if scene_text:
				try:
					self.scene.set_snapshot(json.loads(scene_text))
				except (ValueError, KeyError, TypeError, AttributeError) as e:
					_logger.warning(f"Discarding malformed scene data: {e}")
					self.scene.clear()

			self.controller.load()
			_logger.debug(f"Loaded {len(self.scene)} scene objects and {len(self.controller)} array sets")
		except Exception as e:
			loggerRaise(e, "Error loading array tool state")

	def _save_tool_state(self):
		"""Write the scene and array sets to the settings store"""
		try:
			if len(self.scene):
				self.settings_store.set_string(SETTINGS_KEY_SCENE, json.dumps(self.scene.get_snapshot()))
			else:
				self.settings_store.delete_key(SETTINGS_KEY_SCENE)
			# Saves the store as a whole, scene key included
			self.controller.store.save(self.controller.array_sets)
		except Exception as e:
			loggerRaise(e, "Error saving array tool state")
