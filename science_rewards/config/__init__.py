"""Configuration module for science rewards."""
from pydantic import ValidationError

from .loader import load_event_script, load_settings
from .schemas import (
    DEFAULT_SETTINGS,
    SETTINGS_NODE,
    EventScript,
    RewardSettings,
    ScriptedEvent,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "EventScript",
    "RewardSettings",
    "SETTINGS_NODE",
    "ScriptedEvent",
    "ValidationError",
    "load_event_script",
    "load_settings",
]
