"""Report records for converted science rewards.

A ReportRecord is the immutable value produced when a science event is
converted into funds and reputation. Records sit in the BatchQueue backlog
until a flush renders them into the batched notification.

Example:
    >>> record = ReportRecord(funds=2000.0, reputation=2.0, subject="Mystery Goo")
    >>> print(record.render())
     * Mystery Goo:
         2000.0 funds, 2.0 rep.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ReportRecord:
    """One converted reward event.

    Fields:
        funds: Currency units granted
        reputation: Reputation units granted
        subject: Label of the originating science subject
    """

    funds: float
    reputation: float
    subject: str

    def render(self) -> str:
        """Render the two notification lines for this record."""
        return (
            f" * {self.subject}:\n"
            f"     {self.funds:.1f} funds, {self.reputation:.1f} rep."
        )

    def to_entry(self) -> dict[str, Any]:
        """Convert to the persisted entry layout.

        The persisted field for reputation is named ``rep``.
        """
        return {
            "funds": float(self.funds),
            "rep": float(self.reputation),
            "subject": self.subject,
        }

    @classmethod
    def from_entry(cls, funds: float, rep: float, subject: str) -> ReportRecord:
        """Create from the fields of a validated persisted entry."""
        return cls(funds=funds, reputation=rep, subject=subject)
