"""
Science Rewards - debounced batching of science reward notifications.

Converts science events into funds and reputation, credits them right away,
and reports them to the player as one consolidated notification.
"""

from science_rewards.batch_queue import BatchQueue, BatchSummary
from science_rewards.reports import ReportRecord
from science_rewards.scenario import RewardScenario
from science_rewards.timer import OneShotTimer, TimerState

__version__ = "0.1.0"

__all__ = [
    "BatchQueue",
    "BatchSummary",
    "OneShotTimer",
    "ReportRecord",
    "RewardScenario",
    "TimerState",
    "__version__",
]
