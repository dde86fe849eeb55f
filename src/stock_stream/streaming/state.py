"""Per-session lifecycle state shared by both streaming session kinds."""
import logging
from dataclasses import dataclass
from enum import Enum

from stock_stream.streaming.exceptions import IllegalStateTransition, StreamErrorCode

logger = logging.getLogger(__name__)


class StreamState(str, Enum):
    """Lifecycle state of one streaming call."""

    OPEN = "OPEN"
    STREAMING = "STREAMING"
    RECEIVING = "RECEIVING"
    CLOSED = "CLOSED"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL = frozenset({StreamState.CLOSED, StreamState.COMPLETED, StreamState.FAILED})

_ALLOWED: dict[StreamState, frozenset[StreamState]] = {
    StreamState.OPEN: frozenset(
        {StreamState.STREAMING, StreamState.RECEIVING, StreamState.FAILED}
    ),
    StreamState.STREAMING: frozenset({StreamState.CLOSED, StreamState.FAILED}),
    StreamState.RECEIVING: frozenset({StreamState.COMPLETED, StreamState.FAILED}),
}


@dataclass(frozen=True)
class StreamOutcome:
    """How a session ended: terminal state plus failure reason (None unless FAILED)."""

    state: StreamState
    reason: StreamErrorCode | None = None


class StreamLifecycle:
    """Guards state transitions of one session.

    Sessions move forward only; once a terminal state is reached every further
    transition raises IllegalStateTransition.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._state = StreamState.OPEN
        self._reason: StreamErrorCode | None = None

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def reason(self) -> StreamErrorCode | None:
        return self._reason

    @property
    def outcome(self) -> StreamOutcome | None:
        """Terminal outcome, or None while the session is still active."""
        if not self._state.is_terminal:
            return None
        return StreamOutcome(self._state, self._reason)

    def move_to(self, new_state: StreamState) -> None:
        if new_state is StreamState.FAILED:
            raise IllegalStateTransition("Use fail() to enter FAILED")
        self._transition(new_state)

    def fail(self, reason: StreamErrorCode) -> None:
        self._transition(StreamState.FAILED)
        self._reason = reason

    def _transition(self, new_state: StreamState) -> None:
        allowed = _ALLOWED.get(self._state, frozenset())
        if new_state not in allowed:
            raise IllegalStateTransition(
                f"{self._name}: cannot move from {self._state.value} to {new_state.value}"
            )
        logger.debug("%s: %s -> %s", self._name, self._state.value, new_state.value)
        self._state = new_state
