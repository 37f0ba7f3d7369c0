"""Automation features for the Pomodoro timer."""

from pomodoro.automation.notifier import Notifier

__all__ = ["Notifier"]
