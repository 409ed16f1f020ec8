"""
Advanced Array Tool - Array Set Persistence Service

Serializes the array set collection to and from the string-keyed settings
store. The stored value is a JSON document:

    {"sets": [<ArraySet record>, ...]}

Each record carries every field of the data model, including the prefab id
and the root object id, keyed by the set's name.

Malformed data never propagates: loading falls back to an empty collection
and logs a warning.
"""

import json
import logging
from typing import List

from array_tool.models.array_set import ArraySet
from array_tool.utils.settings_store import SettingsStore
from array_tool.constants import SETTINGS_KEY_ARRAY_SETS

_logger = logging.getLogger('ArraySetStore')


def serialize_array_sets(array_sets: List[ArraySet]) -> str:
    """Serialize array sets to a JSON string

    Args:
        array_sets: Sets in display order

    Returns:
        JSON document string
    """
    return json.dumps({'sets': [array_set.to_dict() for array_set in array_sets]})


def deserialize_array_sets(text: str) -> List[ArraySet]:
    """Parse array sets from a JSON string

    Args:
        text: JSON document produced by serialize_array_sets

    Returns:
        List of ArraySet objects, empty if the text is blank or malformed
    """
    if not text:
        return []

    try:
        data = json.loads(text)
        records = data['sets']
        if not isinstance(records, list):
            raise TypeError(f"'sets' must be a list, got {type(records).__name__}")
        return [ArraySet.from_dict(record) for record in records]
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        _logger.warning(f"Discarding malformed array set data: {e}")
        return []


class ArraySetStore:
    """Loads and saves the array set collection under one settings key"""

    def __init__(self, settings: SettingsStore, key: str = SETTINGS_KEY_ARRAY_SETS):
        self.settings = settings
        self.key = key

    def load(self) -> List[ArraySet]:
        return deserialize_array_sets(self.settings.get_string(self.key, ""))

    def save(self, array_sets: List[ArraySet]):
        """Write the collection, removing the key entirely when it is empty"""
        if array_sets:
            self.settings.set_string(self.key, serialize_array_sets(array_sets))
        else:
            self.settings.delete_key(self.key)
        self.settings.save()
