"""Checkout handshake models — the tagged outcome of a checkout popup.

Exactly one of four cases is produced per launch: success, pending,
error or cancelled. The ``status`` field is the discriminator.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nuorbit.models.session import FlowMode


class CheckoutResultBase(BaseModel):
    """Fields every checkout outcome may carry."""

    model_config = ConfigDict(frozen=True)

    message: str | None = None
    network: str | None = None
    network_label: str | None = None
    flow_mode: FlowMode | None = None
    stable_symbol: str | None = None


class CheckoutSuccess(CheckoutResultBase):
    """The payer completed the checkout."""

    status: Literal["success"] = "success"
    flow_mode: FlowMode = FlowMode.CROSS_CHAIN
    target_network: str | None = None
    target_chain_id: int | float | None = None
    source_chain_id: int | float | None = None
    transfer_tx: str | None = None
    registry_tx: str | None = None
    proof_tx: str | None = None
    proof_id: str | None = None
    completion_id: str | None = None
    contract: str | None = None
    amount: str | None = None
    goat_account: str | None = None
    session_id: str | None = None
    tx_hash: str | None = None  # legacy single-hash field from older checkout builds


class CheckoutPending(CheckoutResultBase):
    """The checkout reported progress but no final outcome."""

    status: Literal["pending"] = "pending"


class CheckoutFailure(CheckoutResultBase):
    """The checkout reported a failure. ``message`` is always present."""

    status: Literal["error"] = "error"
    message: str

    @field_validator("message")
    @classmethod
    def _message_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("error outcome requires a non-empty message")
        return value


class CheckoutCancelled(CheckoutResultBase):
    """The popup closed without ever reporting an outcome."""

    status: Literal["cancelled"] = "cancelled"


CheckoutResult = Annotated[
    Union[CheckoutSuccess, CheckoutPending, CheckoutFailure, CheckoutCancelled],
    Field(discriminator="status"),
]


class CheckoutOptions(BaseModel):
    """Caller-supplied parameters for launching a checkout popup.

    Every field is optional; absent query parameters are omitted from the
    checkout URL entirely.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    base_url: str | None = None
    path: str = "/demo/checkout"
    window_name: str = "nuorbit-checkout"
    window_features: str = "popup=yes,resizable=yes,width=420,height=720,noopener=yes"
    price_usd: float | int | str | None = None
    pay_to: str | None = None
    description: str | None = None
    prefill_network: str | None = None
    prefill_stable: str | None = None
    flow_mode: FlowMode | None = None
    target_origin: str | None = None
    on_popup_blocked: Callable[[], None] | None = None
