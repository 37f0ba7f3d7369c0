"""IPC (Inter-Process Communication) for daemon-client communication.

One command per connection over a Unix domain socket. The client writes a
command token, the server answers with a single JSON response and closes.
"""

import logging
import socket
import threading
from pathlib import Path
from typing import Callable, Optional

from pomodoro.daemon.platform import get_ipc_socket_path
from pomodoro.daemon.protocol import (
    COMMAND_GET,
    COMMAND_SWITCH,
    MAX_MESSAGE_SIZE,
    UNKNOWN_COMMAND,
    Response,
    Status,
)

logger = logging.getLogger(__name__)


class IPCError(Exception):
    """IPC communication error."""

    pass


class IPCServer:
    """IPC server for handling client requests.

    Each accepted connection is served on its own thread, so a slow client
    only ever holds up itself.
    """

    def __init__(self, socket_path: Optional[Path] = None):
        """Initialize IPC server.

        Args:
            socket_path: Path to Unix socket (default: platform-specific)
        """
        self.socket_path = socket_path or get_ipc_socket_path()
        self.socket: Optional[socket.socket] = None
        self.running = False
        self.handlers: dict[str, Callable[[], Response]] = {}
        self._server_thread: Optional[threading.Thread] = None

    def register_handler(self, command: str, handler: Callable[[], Response]) -> None:
        """Register a handler for a command token.

        Args:
            command: Command name (e.g., 'get', 'switch')
            handler: Callable producing the response
        """
        self.handlers[command] = handler
        logger.debug(f"Registered handler for command: {command}")

    def start(self) -> None:
        """Start the IPC server.

        Raises:
            IPCError: If a stale socket cannot be removed or binding fails
        """
        if self.running:
            logger.warning("IPC server already running")
            return

        self._remove_stale_socket()

        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.bind(str(self.socket_path))
            sock.listen(5)
            # Owner only
            self.socket_path.chmod(0o600)
        except OSError as e:
            sock.close()
            raise IPCError(f"Failed to create socket at {self.socket_path}: {e}")

        self.socket = sock
        self.running = True
        self._server_thread = threading.Thread(target=self._accept_loop, daemon=True)
        self._server_thread.start()
        logger.info(f"IPC server started on {self.socket_path}")

    def _remove_stale_socket(self) -> None:
        """Remove a socket file left behind by a previous run."""
        if not (self.socket_path.exists() or self.socket_path.is_symlink()):
            return

        try:
            self.socket_path.unlink()
            logger.debug(f"Removed stale socket {self.socket_path}")
        except OSError as e:
            raise IPCError(f"Failed to remove existing socket {self.socket_path}: {e}")

    def _accept_loop(self) -> None:
        """Accept client connections."""
        while self.running:
            try:
                if self.socket is None:
                    break

                self.socket.settimeout(1.0)  # Allow periodic checks of self.running
                try:
                    client_socket, _ = self.socket.accept()
                except socket.timeout:
                    continue

                client_socket.settimeout(None)
                client_thread = threading.Thread(
                    target=self._handle_client, args=(client_socket,), daemon=True
                )
                client_thread.start()
            except Exception as e:
                if self.running:  # Only log if not shutting down
                    logger.error(f"Error in accept loop: {e}")

    def _handle_client(self, client_socket: socket.socket) -> None:
        """Serve exactly one request, then close.

        Args:
            client_socket: Client socket
        """
        try:
            data = client_socket.recv(MAX_MESSAGE_SIZE + 1)
            if len(data) > MAX_MESSAGE_SIZE:
                logger.debug("Dropping oversized request")
                return

            command = data.decode("utf-8").strip()
            response = self.process_command(command)
            client_socket.sendall(response.encode())
        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.debug(f"Dropping client connection: {e}")
        except Exception as e:
            logger.error(f"Error handling client: {e}")
        finally:
            client_socket.close()

    def process_command(self, command: str) -> Response:
        """Dispatch a trimmed command token to its handler.

        Args:
            command: Command token

        Returns:
            Handler response, or an error response for unknown commands
        """
        handler = self.handlers.get(command)
        if handler is None:
            return Response.fail(UNKNOWN_COMMAND)
        return handler()

    def stop(self) -> None:
        """Stop the IPC server."""
        if not self.running:
            return

        logger.info("Stopping IPC server...")
        self.running = False

        if self.socket:
            self.socket.close()
            self.socket = None

        if self._server_thread:
            self._server_thread.join(timeout=2.0)

        if self.socket_path.exists():
            self.socket_path.unlink()

        logger.info("IPC server stopped")


class IPCClient:
    """One-shot client for talking to the daemon."""

    def __init__(self, socket_path: Optional[Path] = None, timeout: float = 5.0):
        """Initialize IPC client.

        Args:
            socket_path: Path to Unix socket (default: platform-specific)
            timeout: Connection timeout in seconds
        """
        self.socket_path = socket_path or get_ipc_socket_path()
        self.timeout = timeout

    def send_command(self, command: str) -> Response:
        """Send a raw command and return the daemon's response.

        Args:
            command: Command token

        Returns:
            Parsed response (may carry an error)

        Raises:
            IPCError: If communication fails or the response is malformed
        """
        try:
            data = self._exchange(command.encode("utf-8"))
        except OSError as e:
            raise IPCError(f"Failed to communicate with daemon: {e}")

        if not data:
            raise IPCError("Failed to communicate with daemon: empty response")

        try:
            return Response.decode(data)
        except ValueError as e:
            raise IPCError(f"Error parsing response: {e}")

    def call(self, command: str) -> Status:
        """Send a command and return the status it produced.

        Raises:
            IPCError: If communication fails or the daemon reports an error
        """
        response = self.send_command(command)
        if response.error is not None:
            raise IPCError(f"Daemon error: {response.error}")
        if response.status is None:
            raise IPCError("Error parsing response: missing status")
        return response.status

    def get_status(self) -> Status:
        return self.call(COMMAND_GET)

    def toggle(self) -> Status:
        return self.call(COMMAND_SWITCH)

    def _exchange(self, payload: bytes) -> bytes:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self.timeout)

        try:
            sock.connect(str(self.socket_path))
            sock.sendall(payload)

            # Server closes the connection after replying
            response_data = b""
            while True:
                chunk = sock.recv(4096)
                if not chunk:
                    break
                response_data += chunk
            return response_data

        finally:
            sock.close()

    def is_daemon_running(self) -> bool:
        """Check if daemon is running.

        Returns:
            True if daemon is accessible, False otherwise
        """
        try:
            self.get_status()
            return True
        except IPCError:
            return False
