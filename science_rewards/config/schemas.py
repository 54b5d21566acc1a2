"""Pydantic schemas for reward settings validation."""
from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ============================================================================
# Reward Settings
# ============================================================================

SETTINGS_NODE = "reward_settings"


class RewardSettings(BaseModel):
    """Tunable conversion and batching parameters.

    ``funds``, ``rep`` and ``queueLength`` must all be present in a settings
    file; ``interval`` is optional.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    funds: float = Field(..., description="Funds granted per science point")
    rep: float = Field(..., description="Reputation granted per science point")
    queue_length: int = Field(
        ...,
        alias="queueLength",
        description="Backlog size that must be exceeded before a batch is flushed",
        gt=0,
    )
    interval: float = Field(
        1.0, description="Quiet interval in seconds before the backlog is checked", gt=0
    )

    @field_validator("funds", "rep")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        """Reject NaN and infinite multipliers."""
        if not math.isfinite(v):
            raise ValueError(f"multiplier must be a finite number, got {v}")
        return v

    @classmethod
    def from_dict(cls, settings_dict: dict) -> RewardSettings:
        """Create settings from dictionary."""
        return cls.model_validate(settings_dict)


DEFAULT_SETTINGS = RewardSettings(funds=1000.0, rep=1.0, queueLength=5)


# ============================================================================
# Event Script
# ============================================================================


class ScriptedEvent(BaseModel):
    """One science event in a replay script."""

    at: float = Field(..., description="Seconds from the start of the replay", ge=0)
    science: float = Field(..., description="Science points received")
    subject: str = Field(..., description="Science subject label", min_length=1)


class EventScript(BaseModel):
    """Replay script for the simulate command."""

    events: list[ScriptedEvent] = Field(default_factory=list)

    @field_validator("events")
    @classmethod
    def sort_by_time(cls, v: list[ScriptedEvent]) -> list[ScriptedEvent]:
        """Order events by time, keeping file order for equal times."""
        return sorted(v, key=lambda event: event.at)

    @property
    def duration(self) -> float:
        """Time of the last scripted event."""
        return self.events[-1].at if self.events else 0.0
