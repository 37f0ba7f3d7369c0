"""Main daemon implementation."""

import logging
import signal
import threading
from pathlib import Path
from typing import Any, Optional

from pomodoro.automation import Notifier
from pomodoro.core.config import ConfigManager
from pomodoro.core.timer import (
    DEFAULT_REST_SECONDS,
    DEFAULT_WORK_SECONDS,
    Period,
    TimerSnapshot,
    TimerState,
)
from pomodoro.daemon.ipc import IPCError, IPCServer
from pomodoro.daemon.lock import ReadWriteLock
from pomodoro.daemon.platform import get_log_file_path, is_daemon_supported
from pomodoro.daemon.protocol import COMMAND_GET, COMMAND_SWITCH, Response, Status

logger = logging.getLogger(__name__)

TICK_INTERVAL = 1.0


class DaemonError(Exception):
    """Daemon-related error."""

    pass


class PomodoroDaemon:
    """Pomodoro background daemon.

    Owns the timer state, advances it once per second on a background
    thread and answers ``get``/``switch`` requests over a Unix socket.
    Every access to the state goes through a single reader/writer lock.
    """

    def __init__(
        self,
        work_seconds: int = DEFAULT_WORK_SECONDS,
        rest_seconds: int = DEFAULT_REST_SECONDS,
        socket_path: Optional[Path] = None,
        notifier: Optional[Notifier] = None,
        tick_interval: float = TICK_INTERVAL,
    ):
        """Initialize daemon.

        Args:
            work_seconds: Length of a work period in seconds
            rest_seconds: Length of a rest period in seconds
            socket_path: Path to Unix socket (default: platform-specific)
            notifier: Notifier fired on period switches
            tick_interval: Seconds between ticks

        Raises:
            DaemonError: If daemon is not supported on this platform
        """
        supported, reason = is_daemon_supported()
        if not supported:
            raise DaemonError(reason)

        self.state = TimerState(work_seconds=work_seconds, rest_seconds=rest_seconds)
        self.notifier = notifier if notifier is not None else Notifier()
        self.ipc_server = IPCServer(socket_path)
        self.tick_interval = tick_interval

        self._lock = ReadWriteLock()
        self.running = False
        self._shutdown_event = threading.Event()
        self._tick_thread: Optional[threading.Thread] = None

    @classmethod
    def from_config(
        cls,
        config: ConfigManager,
        socket_path: Optional[Path] = None,
        work_minutes: Optional[int] = None,
        rest_minutes: Optional[int] = None,
    ) -> "PomodoroDaemon":
        """Build a daemon from configuration, with optional overrides.

        Args:
            config: Configuration manager
            socket_path: Socket path override
            work_minutes: Work period override in minutes
            rest_minutes: Rest period override in minutes

        Returns:
            Configured daemon
        """
        notifier = Notifier(
            enabled=config.get("notifications.enabled", True),
            backend=config.get("notifications.backend", "auto"),
            timeout=config.get("notifications.timeout", 5),
        )
        return cls(
            work_seconds=work_minutes * 60 if work_minutes else config.work_seconds,
            rest_seconds=rest_minutes * 60 if rest_minutes else config.rest_seconds,
            socket_path=socket_path or config.socket_path,
            notifier=notifier,
        )

    @property
    def socket_path(self) -> Path:
        return self.ipc_server.socket_path

    def start(self) -> None:
        """Bind the socket and start ticking.

        The timer always boots stopped and must be toggled on.

        Raises:
            DaemonError: If the IPC server cannot be started
        """
        if self.running:
            logger.warning("Daemon already running")
            return

        with self._lock.write_locked():
            self.state.stop()

        self._register_ipc_handlers()

        try:
            self.ipc_server.start()
        except IPCError as e:
            logger.error(f"Failed to start IPC server: {e}")
            raise DaemonError(f"Failed to start IPC server: {e}")

        self.running = True
        self._shutdown_event.clear()
        self._tick_thread = threading.Thread(target=self._tick_loop, daemon=True)
        self._tick_thread.start()

        logger.info(f"Daemon started, socket: {self.socket_path}")

    def run(self, log_level: str = "INFO", log_file: Optional[Path] = None) -> None:
        """Run in the foreground until SIGTERM or SIGINT.

        Args:
            log_level: Logging level name
            log_file: Log file path (default: platform-specific)

        Raises:
            DaemonError: If the daemon fails to start
        """
        self._setup_logging(log_level, log_file)
        self._setup_signal_handlers()
        self.start()
        self._shutdown_event.wait()

    def stop(self) -> None:
        """Stop the daemon."""
        if not self.running:
            self._shutdown_event.set()
            return

        logger.info("Stopping daemon...")
        self.running = False
        self._shutdown_event.set()

        self.ipc_server.stop()

        if self._tick_thread and self._tick_thread is not threading.current_thread():
            self._tick_thread.join(timeout=2.0)

        logger.info("Daemon stopped")

    def _setup_logging(self, log_level: str, log_file: Optional[Path]) -> None:
        """Setup daemon logging."""
        level = getattr(logging, log_level.upper(), logging.INFO)

        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

        file_handler = logging.FileHandler(log_file or get_log_file_path())
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    def _setup_signal_handlers(self) -> None:
        """Setup signal handlers for shutdown."""
        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

    def _signal_handler(self, signum: int, frame: Any) -> None:
        logger.info(f"Received signal {signum}, shutting down...")
        self.stop()

    def _tick_loop(self) -> None:
        """Advance the timer once per interval until stopped."""
        logger.info("Tick loop started")

        while not self._shutdown_event.wait(self.tick_interval):
            try:
                self.tick()
            except Exception as e:
                logger.error(f"Error in tick loop: {e}")

        logger.info("Tick loop stopped")

    def tick(self) -> Optional[Period]:
        """Advance the timer by one second.

        The notifier runs on its own thread after the lock is released,
        so a slow notification never delays readers or the next tick.

        Returns:
            The period just entered, if the tick caused a switch
        """
        with self._lock.write_locked():
            new_period = self.state.tick()

        if new_period is not None:
            logger.info(f"Entering {new_period.value} period")
            threading.Thread(target=self._notify, args=(new_period,), daemon=True).start()

        return new_period

    def _notify(self, period: Period) -> None:
        try:
            self.notifier.notify_period(period)
        except Exception as e:
            logger.error(f"Notifier failed: {e}")

    def toggle(self) -> TimerSnapshot:
        """Start or stop the timer.

        Returns:
            State produced by the toggle
        """
        with self._lock.write_locked():
            self.state.toggle()
            snapshot = self.state.snapshot()

        logger.info(f"Timer toggled: {snapshot.period.value} {snapshot.remaining_str}")
        return snapshot

    def snapshot(self) -> TimerSnapshot:
        with self._lock.read_locked():
            return self.state.snapshot()

    def _register_ipc_handlers(self) -> None:
        """Register IPC request handlers."""
        self.ipc_server.register_handler(COMMAND_GET, self._handle_get)
        self.ipc_server.register_handler(COMMAND_SWITCH, self._handle_switch)

    def _handle_get(self) -> Response:
        return Response.ok(Status.from_snapshot(self.snapshot()))

    def _handle_switch(self) -> Response:
        return Response.ok(Status.from_snapshot(self.toggle()))
