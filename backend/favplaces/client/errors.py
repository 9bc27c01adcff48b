"""
Favorite Places — Error Notification Channel
=============================================

What:  The place where client components put user-facing error messages.
How:   Components receive an `ErrorReporter` (anything with `report(message)`)
       when they are constructed. The presentation layer owns the concrete
       `ErrorChannel`, shows `channel.message.value` when it is not None, and
       calls `clear()` once the user dismisses it.

The channel holds a single message: each report replaces the previous one.
"""

import logging
from typing import Optional, Protocol

from favplaces.client.state import ReadOnlyState, StateCell

logger = logging.getLogger(__name__)


class ErrorReporter(Protocol):
    """Capability handed to components that may need to surface an error."""

    def report(self, message: str) -> None:
        ...


class ErrorChannel:
    """Single-slot, clearable error message."""

    def __init__(self) -> None:
        self._message: StateCell[Optional[str]] = StateCell(None)
        self.message: ReadOnlyState[Optional[str]] = self._message.as_readonly()

    def report(self, message: str) -> None:
        logger.debug("Error reported: %s", message)
        self._message.set(message)

    def clear(self) -> None:
        self._message.set(None)
