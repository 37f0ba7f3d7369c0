"""Core timer functionality."""

from pomodoro.core.config import ConfigManager
from pomodoro.core.timer import Period, TimerSnapshot, TimerState, format_duration

__all__ = ["ConfigManager", "Period", "TimerSnapshot", "TimerState", "format_duration"]
