"""YAML settings loader."""
from pathlib import Path

import yaml

from .schemas import SETTINGS_NODE, EventScript, RewardSettings


def load_settings(settings_path: str | Path) -> RewardSettings:
    """
    Load and validate reward settings from YAML file.

    The file must contain a ``reward_settings`` mapping.

    Args:
        settings_path: Path to YAML settings file

    Returns:
        Validated RewardSettings instance

    Raises:
        FileNotFoundError: If settings file doesn't exist
        ValueError: If settings are missing or invalid
        yaml.YAMLError: If YAML parsing fails
    """
    settings_path = Path(settings_path)

    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with open(settings_path) as f:
        document = yaml.safe_load(f)

    if document is None:
        raise ValueError(f"Empty settings file: {settings_path}")

    if not isinstance(document, dict) or not isinstance(document.get(SETTINGS_NODE), dict):
        raise ValueError(f"Missing '{SETTINGS_NODE}' node in {settings_path}")

    # Validate and create settings
    try:
        settings = RewardSettings.from_dict(document[SETTINGS_NODE])
    except Exception as e:
        raise ValueError(f"Invalid settings: {e}") from e

    return settings


def load_event_script(script_path: str | Path) -> EventScript:
    """
    Load and validate a replay event script from YAML file.

    Args:
        script_path: Path to YAML file with an ``events`` list

    Returns:
        Validated EventScript with events ordered by time

    Raises:
        FileNotFoundError: If script file doesn't exist
        ValueError: If the script is invalid
    """
    script_path = Path(script_path)

    if not script_path.exists():
        raise FileNotFoundError(f"Event script not found: {script_path}")

    with open(script_path) as f:
        document = yaml.safe_load(f)

    if document is None:
        return EventScript()

    try:
        return EventScript.model_validate(document)
    except Exception as e:
        raise ValueError(f"Invalid event script: {e}") from e
