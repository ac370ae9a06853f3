"""Flow orchestration models — session requests, transfer requests, events."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from nuorbit.models.session import FlowMode, Session, WireModel


class SessionRequest(WireModel):
    """Parameters for creating a remote session."""

    network: str
    chain_label: str
    chain_id: int
    price_usd: float
    pay_to: str
    description: str
    asset_symbol: str
    asset_decimals: int
    asset_address: str
    participant_address: str
    flow_mode: FlowMode | None = None
    provider_call_id: str | None = None
    stable_symbol: str | None = None


class TransferRequest(BaseModel):
    """What the caller's transfer capability must send on the source chain.

    ``amount_atomic`` is an exact integer parsed from the session's
    base-10 atomic amount string.
    """

    model_config = ConfigDict(frozen=True)

    chain_id: int
    token_address: str
    recipient: str
    amount_atomic: int
    decimals: int
    symbol: str
    session: Session


class FlowEventType(str, Enum):
    """Lifecycle events emitted by one orchestration run, in order."""

    FLOW_STARTED = "flow-started"
    SESSION_CREATED = "session-created"
    TRANSFER_REQUESTED = "transfer-requested"
    TRANSFER_SUBMITTED = "transfer-submitted"
    TRANSFER_CONFIRMED = "transfer-confirmed"
    EXECUTION_STARTED = "execution-started"
    EXECUTION_COMPLETE = "execution-complete"
    PROOF_PENDING = "proof-pending"
    PROOF_READY = "proof-ready"
    FLOW_COMPLETED = "flow-completed"
    FLOW_ERROR = "flow-error"


class FlowEvent(BaseModel):
    """A single lifecycle event.

    Which optional fields are populated depends on ``type``:
    ``mode`` on flow-started, ``session_token`` on session-created,
    ``payload`` on transfer-requested, ``tx_hash`` on transfer-submitted,
    ``error`` on flow-error. ``session`` carries the snapshot current at
    emission time when one exists.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type: FlowEventType
    session: Session | None = None
    session_token: str | None = None
    mode: FlowMode | None = None
    payload: TransferRequest | None = None
    tx_hash: str | None = None
    error: BaseException | None = None


class FlowResult(BaseModel):
    """Outcome of a completed orchestration run."""

    model_config = ConfigDict(frozen=True)

    session: Session
    session_token: str
    transfer_tx: str | None = None
    registry_tx: str | None = None
