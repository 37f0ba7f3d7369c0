"""Timer state machine for alternating work and rest periods."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

DEFAULT_WORK_SECONDS = 25 * 60
DEFAULT_REST_SECONDS = 5 * 60

SECONDS_IN_HOUR = 3600
SECONDS_IN_MINUTE = 60


class Period(Enum):
    """Timer periods.

    The value doubles as the label sent to clients.
    """

    UNKNOWN = "Unknown"
    WORK = "Work"
    REST = "Rest"
    STOPPED = "Stopped"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "Period":
        """Parse a period label, falling back to UNKNOWN.

        Args:
            label: Period label as sent over the wire

        Returns:
            Matching period or Period.UNKNOWN
        """
        for period in cls:
            if period.value == label:
                return period
        return cls.UNKNOWN

    def opposite(self) -> "Period":
        """Return the other half of the work/rest cycle."""
        if self is Period.WORK:
            return Period.REST
        return Period.WORK


def format_duration(seconds: int) -> str:
    """Format seconds as MM:SS, or HH:MM:SS once an hour is reached.

    Example:
        >>> format_duration(65)
        '01:05'
        >>> format_duration(3661)
        '01:01:01'
    """
    hours = seconds // SECONDS_IN_HOUR
    seconds %= SECONDS_IN_HOUR
    minutes = seconds // SECONDS_IN_MINUTE
    seconds %= SECONDS_IN_MINUTE

    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


@dataclass(frozen=True)
class TimerSnapshot:
    """Consistent read of the timer at one instant."""

    period: Period
    remaining: int

    @property
    def remaining_str(self) -> str:
        if self.period is Period.STOPPED:
            return "00:00"
        return format_duration(self.remaining)


class TimerState:
    """Authoritative timer state.

    Holds no lock and does no I/O. Callers are expected to serialize access.
    """

    def __init__(
        self,
        work_seconds: int = DEFAULT_WORK_SECONDS,
        rest_seconds: int = DEFAULT_REST_SECONDS,
    ):
        """Initialize timer state at the start of a work period.

        Args:
            work_seconds: Length of a work period in seconds
            rest_seconds: Length of a rest period in seconds

        Raises:
            ValueError: If either length is not positive
        """
        if work_seconds <= 0 or rest_seconds <= 0:
            raise ValueError("Period lengths must be greater than zero")

        self._period_lengths: Dict[Period, int] = {
            Period.WORK: int(work_seconds),
            Period.REST: int(rest_seconds),
        }
        self.current_period = Period.WORK
        self.remaining = self._period_lengths[Period.WORK]

    @property
    def period_lengths(self) -> Dict[Period, int]:
        return dict(self._period_lengths)

    def tick(self) -> Optional[Period]:
        """Advance the timer by one second.

        Returns:
            The period just entered if a switch happened, otherwise None
        """
        if self.current_period is Period.STOPPED:
            return None

        if self.remaining <= 1:
            self.current_period = self.current_period.opposite()
            self.remaining = self._period_lengths[self.current_period]
            return self.current_period

        self.remaining -= 1
        return None

    def toggle(self) -> None:
        """Resume into a fresh work period, or stop a running timer."""
        if self.current_period is Period.STOPPED:
            self.current_period = Period.WORK
            self.remaining = self._period_lengths[Period.WORK]
        else:
            self.stop()

    def stop(self) -> None:
        self.current_period = Period.STOPPED
        self.remaining = 0

    def snapshot(self) -> TimerSnapshot:
        if self.current_period is Period.STOPPED:
            return TimerSnapshot(period=Period.STOPPED, remaining=0)
        return TimerSnapshot(period=self.current_period, remaining=self.remaining)
