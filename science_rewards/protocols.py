"""Collaborator protocols for the host integration.

The batching core talks to three host subsystems: the event source that
reports received science, the ledger that is credited with converted
funds and reputation, and the notification surface that displays flushed
batches. Each is a structural protocol, so host adapters and test doubles
only need to provide the methods.

Example:
    >>> class PrintSurface:
    ...     def post(self, notification: Notification) -> None:
    ...         print(notification.title)
    >>>
    >>> isinstance(PrintSurface(), NotificationSurface)
    True
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable

# =============================================================================
# Enums
# =============================================================================


class TransactionReason(str, Enum):
    """Reason tag attached to ledger credits."""

    SCIENCE_TRANSMISSION = "science_transmission"


class MessageColor(str, Enum):
    """Color tag of a posted notification."""

    BLUE = "blue"
    GREEN = "green"
    RED = "red"
    YELLOW = "yellow"


class MessageIcon(str, Enum):
    """Icon tag of a posted notification."""

    MESSAGE = "message"
    ALERT = "alert"
    ACHIEVE = "achieve"


# =============================================================================
# Notification
# =============================================================================


@dataclass(frozen=True)
class Notification:
    """A message handed to the notification surface."""

    title: str
    body: str
    color: MessageColor
    icon: MessageIcon


# Handler signature used by science event sources:
# (science, subject, vessel, transmitted) -> None
ScienceHandler = Callable[..., Any]


# =============================================================================
# Protocols
# =============================================================================


@runtime_checkable
class Ledger(Protocol):
    """Currency and reputation ledger credited on every reward event."""

    def add_funds(self, amount: float, reason: TransactionReason) -> None:
        """Credit funds to the player's account."""
        ...

    def add_reputation(self, amount: float, reason: TransactionReason) -> None:
        """Credit reputation to the player's account."""
        ...


@runtime_checkable
class NotificationSurface(Protocol):
    """User-facing surface that displays notifications."""

    def post(self, notification: Notification) -> None:
        """Display a notification."""
        ...


@runtime_checkable
class ScienceEventSource(Protocol):
    """Source of science-received events.

    Handlers are called with ``(science, subject, vessel, transmitted)``.
    """

    def subscribe(self, handler: ScienceHandler) -> None:
        """Register a handler."""
        ...

    def unsubscribe(self, handler: ScienceHandler) -> None:
        """Deregister a previously registered handler.

        Raises:
            ValueError: If the handler is not registered
        """
        ...
