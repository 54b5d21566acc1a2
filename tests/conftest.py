"""
Pytest configuration and shared fixtures.

Provides:
- A manually advanced clock for driving the debounce timer
- In-memory ledger and notification inbox doubles
- Settings files written to tmp_path
"""

from pathlib import Path
from typing import Callable

import pytest
import yaml

from science_rewards.batch_queue import BatchQueue
from science_rewards.config import RewardSettings
from science_rewards.host import EventBus, InMemoryLedger, NotificationInbox, SimulatedClock


@pytest.fixture
def clock() -> SimulatedClock:
    return SimulatedClock()


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def inbox() -> NotificationInbox:
    return NotificationInbox()


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def settings() -> RewardSettings:
    """Settings used by the worked example: 1000 funds, 1 rep, threshold 5, 1s."""
    return RewardSettings(funds=1000.0, rep=1.0, queueLength=5, interval=1.0)


@pytest.fixture
def queue(settings, ledger, inbox, clock) -> BatchQueue:
    return BatchQueue(settings, ledger=ledger, surface=inbox, clock=clock)


@pytest.fixture
def write_settings(tmp_path) -> Callable[..., Path]:
    """Write a settings YAML file and return its path.

    Usage:
        path = write_settings(funds=500, rep=2, queueLength=3)
        path = write_settings(raw="not: [valid")
    """

    def _write(name: str = "settings.yaml", raw: str | None = None, **values) -> Path:
        path = tmp_path / name
        if raw is not None:
            path.write_text(raw)
        else:
            path.write_text(yaml.dump({"reward_settings": values}))
        return path

    return _write
