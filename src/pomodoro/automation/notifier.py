"""Desktop notifications for period switches."""

import logging
import subprocess
from typing import Any, Optional

from pomodoro.core.timer import Period

logger = logging.getLogger(__name__)

APP_NAME = "Pomodoro Timer"

BACKEND_AUTO = "auto"
BACKEND_PLYER = "plyer"
BACKEND_NOTIFY_SEND = "notify-send"

PERIOD_MESSAGES = {
    Period.WORK: ("Pomodoro: Work Time!", "Time to focus! Start your work session."),
    Period.REST: ("Pomodoro: Break Time!", "Take a break and relax."),
}


class Notifier:
    """Send desktop notifications."""

    def __init__(self, enabled: bool = True, backend: str = BACKEND_AUTO, timeout: int = 5):
        """Initialize notifier.

        Args:
            enabled: Whether notifications are enabled
            backend: Notification backend ('auto', 'plyer' or 'notify-send')
            timeout: Display duration in seconds
        """
        self.enabled = enabled
        self.backend = backend
        self.timeout = timeout
        self._notifier = self._init_notifier()

    def _init_notifier(self) -> Any:
        """Initialize the plyer notification facade.

        Returns:
            Notification handler or None if not available
        """
        if not self.enabled or self.backend == BACKEND_NOTIFY_SEND:
            return None

        try:
            from plyer import notification  # type: ignore[import-not-found]

            return notification  # type: ignore[no-any-return]
        except ImportError:
            logger.warning("plyer is not available, desktop notifications disabled")
            return None

    def notify(self, title: str, message: str) -> None:
        """Send a desktop notification.

        Failures are logged and never raised.

        Args:
            title: Notification title
            message: Notification message
        """
        if not self.enabled:
            return

        try:
            if self.backend == BACKEND_NOTIFY_SEND:
                self._notify_send(title, message)
            elif self._notifier:
                self._notifier.notify(  # type: ignore[attr-defined]
                    title=title,
                    message=message,
                    app_name=APP_NAME,
                    timeout=self.timeout,
                )
        except Exception as e:
            logger.warning(f"Failed to send notification: {e}")

    def _notify_send(self, title: str, message: str) -> None:
        subprocess.run(
            [
                "notify-send",
                "-t",
                str(self.timeout * 1000),
                "-a",
                APP_NAME,
                title,
                message,
            ],
            check=True,
            capture_output=True,
            timeout=self.timeout,
        )

    def notify_period(self, period: Period) -> None:
        """Announce that a new period has started.

        Args:
            period: Period just entered
        """
        title, message = PERIOD_MESSAGES.get(period, PERIOD_MESSAGES[Period.REST])
        self.notify(title, message)

