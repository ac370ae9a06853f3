"""Flow orchestrator — drives one session through its full lifecycle.

The orchestrator issues the remote session operations strictly in order,
reassigning the (rotating) session token after every response, and emits
one ``FlowEvent`` per transition. The first failure aborts the run: one
``flow-error`` event is emitted and the exception is re-raised. Nothing is
retried, compensated, or rolled back; the remote service owns recovery of
its own state.

Step sequence::

    flow-started -> create session -> transfer-requested -> transfer
    -> confirm transfer -> [execute -> proof | direct proof] -> complete
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Union

from nuorbit.config import ConfigurationError
from nuorbit.core.events import EventSink
from nuorbit.core.session_client import SessionClient
from nuorbit.core.status_machine import SessionOperation, SessionStatusTracker
from nuorbit.models.flow import (
    FlowEvent,
    FlowEventType,
    FlowResult,
    SessionRequest,
    TransferRequest,
)
from nuorbit.models.session import FlowMode, Session, SessionResponse

logger = logging.getLogger(__name__)

DEFAULT_STEP_DELAY_MS = 400
DEFAULT_PROOF_DELAY_MS = 900

TransferFunction = Callable[[TransferRequest], Union[Awaitable[str], str]]
SleepFunction = Callable[[float], Awaitable[None]]


def parse_atomic_amount(value: str) -> int:
    """Parse a base-10 atomic amount string into an exact integer."""
    text = value.strip()
    if not (text.isascii() and text.isdigit()):
        raise ValueError(f"Invalid atomic amount: {value!r}")
    return int(text)


def build_transfer_request(session: Session, fallback_chain_id: int) -> TransferRequest:
    """Derive what the payer must send from a freshly created session."""
    chain_id = session.source_chain_id if session.source_chain_id is not None else fallback_chain_id
    return TransferRequest(
        chain_id=chain_id,
        token_address=session.asset_address,
        recipient=session.source_address,
        amount_atomic=parse_atomic_amount(session.amount_atomic),
        decimals=session.asset_decimals,
        symbol=session.asset_symbol,
        session=session,
    )


class FlowOrchestrator:
    """Runs the NuOrbit session state machine against a ``SessionClient``.

    Parameters
    ----------
    client:
        Remote session client used for every call.
    default_provider_call_id:
        Provider-call template used for cross-chain runs that do not pass
        one explicitly.
    step_delay_ms, proof_delay_ms:
        Default pacing between steps and before the cross-chain proof
        fetch. Zero or negative disables the pause.
    sleep:
        Awaitable sleep used for pacing (seconds). Defaults to ``asyncio.sleep``.
    """

    def __init__(
        self,
        client: SessionClient,
        *,
        default_provider_call_id: str | None = None,
        step_delay_ms: int = DEFAULT_STEP_DELAY_MS,
        proof_delay_ms: int = DEFAULT_PROOF_DELAY_MS,
        sleep: SleepFunction | None = None,
    ) -> None:
        self._client = client
        self._default_provider_call_id = default_provider_call_id
        self._step_delay_ms = step_delay_ms
        self._proof_delay_ms = proof_delay_ms
        self._sleep = sleep or asyncio.sleep

    @property
    def client(self) -> SessionClient:
        return self._client

    @property
    def default_provider_call_id(self) -> str | None:
        return self._default_provider_call_id

    async def run_flow(
        self,
        request: SessionRequest,
        *,
        transfer: TransferFunction | None = None,
        transfer_tx_hash: str | None = None,
        on_event: EventSink | None = None,
        provider_call_id: str | None = None,
        step_delay_ms: int | None = None,
        proof_delay_ms: int | None = None,
    ) -> FlowResult:
        """Drive one session from creation to completion.

        Returns the final session, its latest token, the source transfer
        hash and, for cross-chain runs, the registry transaction hash.

        Raises
        ------
        ConfigurationError
            Cross-chain run without a provider-call id, or neither
            ``transfer`` nor ``transfer_tx_hash`` supplied.
        ApiRequestError
            Any remote call failed.
        SessionStateError
            The session status moved backwards.
        """
        step_ms = self._step_delay_ms if step_delay_ms is None else step_delay_ms
        proof_ms = self._proof_delay_ms if proof_delay_ms is None else proof_delay_ms

        def emit(event_type: FlowEventType, **fields) -> None:
            if on_event is not None:
                on_event(FlowEvent(type=event_type, **fields))

        flow_mode = request.flow_mode or FlowMode.CROSS_CHAIN
        tracker = SessionStatusTracker()
        session: Session | None = None

        try:
            emit(FlowEventType.FLOW_STARTED, mode=flow_mode)

            resolved_provider_call_id: str | None = None
            if flow_mode == FlowMode.CROSS_CHAIN:
                resolved_provider_call_id = provider_call_id or self._default_provider_call_id
                if not resolved_provider_call_id:
                    raise ConfigurationError(
                        "Cross-chain execution requires a provider_call_id "
                        "(pass one or configure a default on the SDK)."
                    )

            # 1. Create session
            created = await self._client.create_session(
                request.model_copy(
                    update={"flow_mode": flow_mode, "provider_call_id": resolved_provider_call_id}
                )
            )
            session = tracker.observe(created.session)
            session_token = created.session_token
            logger.info(
                "Session %s created (mode=%s, status=%s)",
                session.session_id, session.flow_mode.value, session.status.value,
            )
            emit(FlowEventType.SESSION_CREATED, session=session, session_token=session_token)

            # 2. Transfer
            transfer_request = build_transfer_request(session, request.chain_id)
            emit(FlowEventType.TRANSFER_REQUESTED, payload=transfer_request, session=session)

            source_tx_hash = transfer_tx_hash
            if not source_tx_hash:
                if transfer is None:
                    raise ConfigurationError(
                        "run_flow requires a transfer callback or a transfer_tx_hash."
                    )
                source_tx_hash = await _call_transfer(transfer, transfer_request)

            emit(FlowEventType.TRANSFER_SUBMITTED, tx_hash=source_tx_hash, session=session)

            tracker.check(SessionOperation.CONFIRM_TRANSFER)
            response = await self._client.confirm_transfer(session_token, source_tx_hash)
            session, session_token = _advance(tracker, response)
            emit(FlowEventType.TRANSFER_CONFIRMED, session=session)

            await self._pause(step_ms)

            # 3. Execution and proof; the server's flow mode is authoritative
            registry_tx_hash: str | None = None
            if session.flow_mode == FlowMode.CROSS_CHAIN:
                emit(FlowEventType.EXECUTION_STARTED, session=session)
                tracker.check(SessionOperation.EXECUTE)
                response = await self._client.execute_session(session_token)
                session, session_token = _advance(tracker, response)
                if session.contract_call is not None:
                    registry_tx_hash = session.contract_call.tx_hash
                emit(FlowEventType.EXECUTION_COMPLETE, session=session)

                await self._pause(proof_ms)
                emit(FlowEventType.PROOF_PENDING, session=session)

                tracker.check(SessionOperation.FETCH_PROOF)
                response = await self._client.fetch_proof(session_token)
                session, session_token = _advance(tracker, response)
                emit(FlowEventType.PROOF_READY, session=session)
            else:
                await self._pause(step_ms)
                tracker.check(SessionOperation.FETCH_DIRECT_PROOF)
                response = await self._client.fetch_direct_proof(session_token, source_tx_hash)
                session, session_token = _advance(tracker, response)
                emit(FlowEventType.PROOF_READY, session=session)

            # 4. Complete
            await self._pause(step_ms)
            tracker.check(SessionOperation.COMPLETE)
            response = await self._client.complete_session(session_token)
            session, session_token = _advance(tracker, response)
            emit(FlowEventType.FLOW_COMPLETED, session=session)

            logger.info("Session %s completed", session.session_id)
            return FlowResult(
                session=session,
                session_token=session_token,
                transfer_tx=source_tx_hash,
                registry_tx=(
                    session.contract_call.tx_hash if session.contract_call is not None else registry_tx_hash
                ),
            )
        except Exception as exc:
            logger.error(
                "Flow aborted (session=%s): %s",
                session.session_id if session is not None else "-",
                exc,
            )
            emit(FlowEventType.FLOW_ERROR, error=exc, session=session)
            raise

    async def _pause(self, ms: int) -> None:
        if ms <= 0:
            return
        await self._sleep(ms / 1000)


def _advance(tracker: SessionStatusTracker, response: SessionResponse) -> tuple[Session, str]:
    """Adopt a remote response as the new authoritative snapshot and token."""
    return tracker.observe(response.session), response.session_token


async def _call_transfer(transfer: TransferFunction, request: TransferRequest) -> str:
    result = transfer(request)
    if inspect.isawaitable(result):
        result = await result
    if not isinstance(result, str) or not result:
        raise TypeError("transfer callback must return the source transaction hash")
    return result
