"""Session snapshot models — mirrored from the remote NuOrbit service.

The remote service owns the session. Locally a session is only ever an
immutable snapshot: each remote response replaces the previous snapshot
wholesale. Wire keys are camelCase; Python attributes are snake_case.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Frozen model that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class FlowMode(str, Enum):
    """The two payment routing strategies."""

    CROSS_CHAIN = "cross-chain"
    DIRECT_PROOF = "direct-proof"


class SessionStatus(str, Enum):
    """Server-tracked lifecycle status of a session."""

    AWAITING_TRANSFER = "awaiting-transfer"
    TRANSFER_CONFIRMED = "transfer-confirmed"
    EXECUTED = "executed"
    PROOF_READY = "proof-ready"
    COMPLETED = "completed"

    @property
    def rank(self) -> int:
        """Position of this status in the lifecycle (0 = first)."""
        return STATUS_ORDER.index(self)


# Statuses only ever move forward through this sequence.
STATUS_ORDER: tuple[SessionStatus, ...] = (
    SessionStatus.AWAITING_TRANSFER,
    SessionStatus.TRANSFER_CONFIRMED,
    SessionStatus.EXECUTED,
    SessionStatus.PROOF_READY,
    SessionStatus.COMPLETED,
)


class PermitDomain(WireModel):
    name: str
    version: str
    chain_id: int
    verifying_contract: str


class PermitTypedField(WireModel):
    name: str
    type: str


class PermitTypedData(WireModel):
    """EIP-712 typed data the permit signature was produced over."""

    domain: PermitDomain
    types: dict[str, list[PermitTypedField]] = {}
    message: dict[str, str] = {}


class Permit(WireModel):
    """Signed ERC-20 permit authorizing the registry to pull funds."""

    asset_symbol: str
    asset_address: str
    amount_atomic: str
    amount_formatted: str
    decimals: int
    deadline: int
    signature: str
    signer: str
    spender: str
    permit_type: str = "erc20-permit"
    issued_by: str
    typed_data: PermitTypedData
    nonce: str
    value_atomic: str


class ContractCall(WireModel):
    """Receipt of the on-chain execution step (cross-chain flow only)."""

    to: str
    data: str
    description: str = ""
    tx_hash: str
    block_number: int | None = None


class Proof(WireModel):
    """Registry proof receipt attesting that the payment was recorded."""

    proof_id: str
    contract_address: str
    goat_account: str
    payer: str
    amount_atomic: str
    amount_formatted: str
    stablecoin: str
    session_hash: str
    recorded_at: int
    tx_hash: str
    block_number: int | None = None


class PendingProof(WireModel):
    """Interim marker while a direct proof is still outstanding."""

    proof_hash: str
    tx_hash: str
    initiated_at: int


class Completion(WireModel):
    """Final acknowledgment of a completed session."""

    submission_id: str
    submitted_at: int
    acknowledged_by: str


class Session(WireModel):
    """A snapshot of one server-owned payment session.

    Only the identifiers, flow mode and status are required; every other
    field tolerates absence so that partially populated snapshots (early in
    the lifecycle) still validate.
    """

    session_id: str
    session_hash: str = ""
    flow_mode: FlowMode
    status: SessionStatus
    stable_symbol: str = ""
    network: str = ""
    chain_label: str = ""
    source_chain_id: int | None = None
    price_usd: float | None = None
    pay_to: str = ""
    description: str = ""
    asset_symbol: str = ""
    asset_decimals: int = 0
    asset_address: str = ""
    amount_atomic: str = "0"  # base-10 integer string
    amount_formatted: str = ""
    goat_account: str = ""
    source_address: str = ""
    target_address: str = ""
    target_chain_id: int | None = None
    target_network: str = ""
    provider_call_id: str | None = None
    created_at: int | None = None
    updated_at: int | None = None
    source_tx_hash: str | None = None
    permit: Permit | None = None
    contract_call: ContractCall | None = None
    proof: Proof | None = None
    pending_proof: PendingProof | None = None
    completion: Completion | None = None


class SessionResponse(WireModel):
    """Every remote session operation answers with ``{session, sessionToken}``."""

    session: Session
    session_token: str
