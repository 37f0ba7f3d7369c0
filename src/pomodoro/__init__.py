"""Pomodoro - work/rest interval timer with a background daemon."""

__version__ = "0.1.0"
