"""Wire protocol shared by the daemon and its clients.

Requests are a single UTF-8 command token. Responses are one compact JSON
object; the server closing the connection marks the end of the message.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pomodoro.core.timer import TimerSnapshot

COMMAND_GET = "get"
COMMAND_SWITCH = "switch"

UNKNOWN_COMMAND = "Unknown command"

MAX_MESSAGE_SIZE = 1024
NANOSECONDS_PER_SECOND = 1_000_000_000


@dataclass(frozen=True)
class Status:
    """Timer status as reported to clients."""

    period: str
    rest_of_time: int
    rest_of_time_str: str

    @classmethod
    def from_snapshot(cls, snapshot: TimerSnapshot) -> "Status":
        return cls(
            period=snapshot.period.value,
            rest_of_time=snapshot.remaining * NANOSECONDS_PER_SECOND,
            rest_of_time_str=snapshot.remaining_str,
        )

    @property
    def rest_of_time_seconds(self) -> int:
        return self.rest_of_time // NANOSECONDS_PER_SECOND

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period,
            "rest_of_time": self.rest_of_time,
            "rest_of_time_str": self.rest_of_time_str,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Status":
        """Build a Status from decoded JSON.

        Raises:
            ValueError: If rest_of_time is not an integer
        """
        try:
            rest_of_time = int(data.get("rest_of_time", 0))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid response: rest_of_time is not an integer ({e})")
        return cls(
            period=str(data.get("period", "")),
            rest_of_time=rest_of_time,
            rest_of_time_str=str(data.get("rest_of_time_str", "")),
        )


@dataclass(frozen=True)
class Response:
    """Either a status or an error message, never both."""

    status: Optional[Status] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.status is None) == (self.error is None):
            raise ValueError("Response must carry exactly one of status or error")

    @classmethod
    def ok(cls, status: Status) -> "Response":
        return cls(status=status)

    @classmethod
    def fail(cls, message: str) -> "Response":
        return cls(error=message)

    def to_dict(self) -> Dict[str, Any]:
        if self.status is not None:
            return {"status": self.status.to_dict()}
        return {"error": self.error}

    def encode(self) -> bytes:
        """Serialize to the compact JSON sent over the socket."""
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False).encode(
            "utf-8"
        )

    @classmethod
    def decode(cls, data: bytes) -> "Response":
        """Parse a response received from the daemon.

        Raises:
            ValueError: If the payload is not a valid response
        """
        try:
            payload = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ValueError(f"Invalid response: {e}")

        if not isinstance(payload, dict):
            raise ValueError("Invalid response: expected a JSON object")

        if payload.get("error"):
            return cls.fail(str(payload["error"]))

        status = payload.get("status")
        if not isinstance(status, dict):
            raise ValueError("Invalid response: missing status")
        return cls.ok(Status.from_dict(status))
