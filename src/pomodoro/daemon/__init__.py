"""
Pomodoro Daemon - Background service running the work/rest timer.

The daemon provides:
- A one-second tick loop advancing the timer
- Desktop notifications on period switches
- IPC interface for CLI communication
"""

from pomodoro.daemon.daemon import DaemonError, PomodoroDaemon
from pomodoro.daemon.ipc import IPCClient, IPCError, IPCServer
from pomodoro.daemon.protocol import Response, Status

__all__ = [
    "DaemonError",
    "PomodoroDaemon",
    "IPCClient",
    "IPCError",
    "IPCServer",
    "Response",
    "Status",
]
