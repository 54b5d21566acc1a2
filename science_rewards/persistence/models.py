"""
Pydantic Models for Persistence Layer

These models define the persisted layout of the reward backlog. A scenario
node stores the backlog under the ``QUEUE`` container as an ordered list of
report entries.
"""

from pydantic import BaseModel, ConfigDict, Field

QUEUE_NODE = "QUEUE"


# ============================================================================
# Report Entry
# ============================================================================


class ReportEntry(BaseModel):
    """Persisted form of one ReportRecord.

    Each entry is validated on its own so a malformed entry can be skipped
    without discarding the rest of the queue.
    """

    model_config = ConfigDict(extra="ignore")

    funds: float = Field(..., description="Funds granted")
    rep: float = Field(..., description="Reputation granted")
    subject: str = Field(..., description="Science subject label")
