"""Defensive parsing of inbound checkout outcome messages.

The popup posts an untyped object. Every field is independently optional
and read only when it has the expected primitive type; anything else is
treated as absent. No field is coerced across types.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from nuorbit.models.checkout import (
    CheckoutFailure,
    CheckoutPending,
    CheckoutResult,
    CheckoutSuccess,
)
from nuorbit.models.session import FlowMode

CHECKOUT_MESSAGE_TYPE = "x402-payment"
DEFAULT_FAILURE_MESSAGE = "NuOrbit checkout failed."


def is_checkout_message(payload: Any) -> bool:
    """True for a structured object carrying the checkout discriminator."""
    return isinstance(payload, Mapping) and payload.get("type") == CHECKOUT_MESSAGE_TYPE


def _string(payload: Mapping[str, Any], key: str) -> str | None:
    value = payload.get(key)
    return value if isinstance(value, str) else None


def _number(payload: Mapping[str, Any], key: str) -> int | float | None:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        finite = math.isfinite(value)
    except OverflowError:
        # int beyond float range
        return None
    return value if finite else None


def _flow_mode(payload: Mapping[str, Any]) -> FlowMode | None:
    value = payload.get("flowMode")
    if value == FlowMode.DIRECT_PROOF.value:
        return FlowMode.DIRECT_PROOF
    if value == FlowMode.CROSS_CHAIN.value:
        return FlowMode.CROSS_CHAIN
    return None


def parse_checkout_message(payload: Any) -> CheckoutResult | None:
    """Normalize an inbound message into a checkout outcome.

    Returns ``None`` when the payload is not a checkout message at all.
    A missing or unrecognized ``status`` yields an error outcome.
    """
    if not is_checkout_message(payload):
        return None

    status = _string(payload, "status") or "error"
    flow_mode = _flow_mode(payload)
    message = _string(payload, "message")
    common = {
        "network": _string(payload, "network"),
        "network_label": _string(payload, "networkLabel"),
        "stable_symbol": _string(payload, "stableSymbol"),
    }

    if status == "success":
        tx_hash = _string(payload, "txHash")
        transfer_tx = _string(payload, "transferTx")
        return CheckoutSuccess(
            **common,
            flow_mode=flow_mode or FlowMode.CROSS_CHAIN,
            target_network=_string(payload, "targetNetwork"),
            target_chain_id=_number(payload, "targetChainId"),
            source_chain_id=_number(payload, "sourceChainId"),
            transfer_tx=transfer_tx if transfer_tx is not None else tx_hash,
            registry_tx=_string(payload, "registryTx"),
            proof_tx=_string(payload, "proofTx"),
            proof_id=_string(payload, "proofId"),
            completion_id=_string(payload, "completionId"),
            contract=_string(payload, "contract"),
            amount=_string(payload, "amount"),
            goat_account=_string(payload, "goatAccount"),
            session_id=_string(payload, "sessionId"),
            tx_hash=tx_hash,
        )

    if status == "pending":
        return CheckoutPending(**common, message=message, flow_mode=flow_mode)

    return CheckoutFailure(
        **common,
        message=message or DEFAULT_FAILURE_MESSAGE,
        flow_mode=flow_mode,
    )
