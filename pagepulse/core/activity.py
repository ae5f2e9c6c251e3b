# ==============================================================================
# Activity Monitor
# ==============================================================================
"""
Inactivity timer driven by user interaction signals.

A single fire-once timer is pending at any time. Every qualifying signal
cancels it and schedules a new one; if the timer is allowed to expire the
registered timeout callback runs. The monitor knows nothing about sessions:
the SessionManager registers "end the current session" as the callback.

Timers are event-loop timers, so reset() must be called from the loop thread
while the loop is running.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Optional

logger = logging.getLogger(__name__)

# Environment signals that count as user activity
ACTIVITY_SIGNALS = frozenset({"mousemove", "keydown", "scroll", "click"})


class ActivityMonitor:
    """
    Fire-once inactivity timer.

    Args:
        timeout_seconds: Inactivity period before the timeout callback fires
        on_timeout: Callback invoked when the timer expires uncancelled
    """

    def __init__(
        self,
        timeout_seconds: float,
        on_timeout: Optional[Callable[[], None]] = None,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")

        self.timeout_seconds = timeout_seconds
        self._on_timeout = on_timeout
        self._handle: Optional[asyncio.TimerHandle] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def register(self, on_timeout: Callable[[], None]) -> None:
        """Set the callback invoked on timeout."""
        self._on_timeout = on_timeout

    def reset(self) -> None:
        """Cancel any pending timer and start a new one from now."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.timeout_seconds, self._fire)

    def handle_signal(self, signal: str) -> bool:
        """
        Reset the timer if the signal counts as activity.

        Args:
            signal: Environment signal name (e.g. "mousemove")

        Returns:
            True if the timer was reset
        """
        if signal not in ACTIVITY_SIGNALS:
            return False
        self.reset()
        return True

    def cancel(self) -> None:
        """Cancel the pending timer, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def pending(self) -> bool:
        """True while a timer is scheduled."""
        return self._handle is not None

    @property
    def deadline(self) -> float | None:
        """Loop time at which the pending timer fires, or None."""
        return self._handle.when() if self._handle is not None else None

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _fire(self) -> None:
        self._handle = None
        logger.debug("No activity for %.0fs", self.timeout_seconds)
        if self._on_timeout is not None:
            self._on_timeout()
