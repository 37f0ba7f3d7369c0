"""Platform-specific utilities for daemon operations."""

import os
import platform
import socket
from enum import Enum
from pathlib import Path
from typing import Tuple

SOCKET_NAME = "pomodoro.sock"
FALLBACK_SOCKET_DIR = Path("/tmp")


class Platform(Enum):
    """Supported platforms."""

    LINUX = "linux"
    MACOS = "darwin"
    WINDOWS = "windows"
    UNKNOWN = "unknown"


def get_platform() -> Platform:
    """Detect the current platform.

    Returns:
        Platform enum value
    """
    system = platform.system().lower()
    if system == "linux":
        return Platform.LINUX
    elif system == "darwin":
        return Platform.MACOS
    elif system == "windows":
        return Platform.WINDOWS
    else:
        return Platform.UNKNOWN


def get_ipc_socket_path() -> Path:
    """Get the default IPC socket path.

    Uses $XDG_RUNTIME_DIR when set, otherwise /tmp.

    Returns:
        Path to the Unix socket
    """
    runtime_dir = os.environ.get("XDG_RUNTIME_DIR")
    if runtime_dir:
        return Path(runtime_dir) / SOCKET_NAME
    return FALLBACK_SOCKET_DIR / SOCKET_NAME


def get_log_file_path() -> Path:
    """Get the daemon log file path.

    Returns:
        Path to daemon log file
    """
    log_dir = Path.home() / ".pomodoro" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / "daemon.log"


def is_daemon_supported() -> Tuple[bool, str]:
    """Check if daemon is supported on this platform.

    Returns:
        Tuple of (is_supported, reason)
    """
    plat = get_platform()

    if plat == Platform.UNKNOWN:
        return False, f"Unsupported platform: {platform.system()}"

    if not hasattr(socket, "AF_UNIX"):
        return False, f"Unix domain sockets are not available on {platform.system()}"

    return True, "Platform supported"
