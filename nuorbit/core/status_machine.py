"""Session status guard — statuses only move forward.

The remote service owns the session lifecycle. This tracker records every
status the orchestrator observes during one run and refuses:

- a snapshot whose status is earlier than one already observed;
- a remote operation tied to a status earlier than the furthest observed.
"""

from __future__ import annotations

from enum import Enum

from nuorbit.models.session import Session, SessionStatus


class SessionStateError(RuntimeError):
    """Raised when the session lifecycle would move backwards."""


class SessionOperation(str, Enum):
    """Remote operations issued after a session exists."""

    CONFIRM_TRANSFER = "confirm-transfer"
    EXECUTE = "execute"
    FETCH_PROOF = "fetch-proof"
    FETCH_DIRECT_PROOF = "fetch-direct-proof"
    COMPLETE = "complete"


# The status a session is expected to be at when each operation is issued.
OPERATION_STATUS: dict[SessionOperation, SessionStatus] = {
    SessionOperation.CONFIRM_TRANSFER: SessionStatus.AWAITING_TRANSFER,
    SessionOperation.EXECUTE: SessionStatus.TRANSFER_CONFIRMED,
    SessionOperation.FETCH_PROOF: SessionStatus.EXECUTED,
    SessionOperation.FETCH_DIRECT_PROOF: SessionStatus.TRANSFER_CONFIRMED,
    SessionOperation.COMPLETE: SessionStatus.PROOF_READY,
}


class SessionStatusTracker:
    """Tracks the furthest status observed for one session."""

    def __init__(self) -> None:
        self._furthest: SessionStatus | None = None
        self._history: list[SessionStatus] = []

    @property
    def furthest(self) -> SessionStatus | None:
        return self._furthest

    @property
    def history(self) -> list[SessionStatus]:
        """Every observed status, in observation order."""
        return list(self._history)

    def observe(self, session: Session) -> Session:
        """Record a new snapshot's status. Returns the snapshot unchanged."""
        status = session.status
        if self._furthest is not None and status.rank < self._furthest.rank:
            raise SessionStateError(
                f"Session {session.session_id} regressed from "
                f"{self._furthest.value} to {status.value}"
            )
        self._history.append(status)
        self._furthest = status
        return session

    def check(self, operation: SessionOperation) -> None:
        """Raise if *operation* belongs to an earlier status than already observed."""
        expected = OPERATION_STATUS[operation]
        if self._furthest is not None and self._furthest.rank > expected.rank:
            raise SessionStateError(
                f"Cannot {operation.value}: session is already {self._furthest.value}, "
                f"operation applies to {expected.value}"
            )
