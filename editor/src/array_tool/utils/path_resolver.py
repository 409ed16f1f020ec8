"""Path resolver for the tool's per-user configuration files.

In development and in frozen builds alike the settings live in the user's
home directory, so both share the same saved array sets.
"""

import os
from pathlib import Path

from array_tool.constants import CONFIG_DIR_NAME, SETTINGS_FILENAME


def get_config_dir() -> Path:
    """Get the per-user config directory.

    The PREFAB_ARRAY_TOOL_HOME environment variable overrides the default
    location (~/.prefab_array_tool).

    Returns:
        Path: Config directory (not created here)
    """
    override = os.environ.get('PREFAB_ARRAY_TOOL_HOME')
    if override:
        return Path(override)
    return Path(os.path.expanduser("~")) / CONFIG_DIR_NAME


def get_settings_path() -> Path:
    """Get path to the settings JSON file.

    Returns:
        Path: Full path to settings.json
    """
    return get_config_dir() / SETTINGS_FILENAME
