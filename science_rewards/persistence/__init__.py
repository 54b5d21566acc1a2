"""
Persistence layer for science rewards.

Provides the persisted entry layout for the reward backlog and a JSON save
file store for scenario nodes.
"""

from .models import QUEUE_NODE, ReportEntry
from .save_file import SaveFileStore, compute_state_hash

__all__ = [
    "QUEUE_NODE",
    "ReportEntry",
    "SaveFileStore",
    "compute_state_hash",
]
