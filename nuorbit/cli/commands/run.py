"""``nuorbit run`` — drive one session through its full lifecycle.

The CLI cannot sign on-chain transfers, so the source transfer must
already have been submitted; its hash is passed with ``--transfer-tx``.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel

from nuorbit.config import ConfigurationError, config
from nuorbit.core.events import EventDispatcher, EventRecorder
from nuorbit.models.flow import FlowEvent, FlowEventType, FlowResult, SessionRequest
from nuorbit.models.session import FlowMode
from nuorbit.sdk import NuorbitSdk

console = Console()

_EVENT_STYLES: dict[FlowEventType, str] = {
    FlowEventType.FLOW_STARTED: "cyan",
    FlowEventType.FLOW_COMPLETED: "bold green",
    FlowEventType.FLOW_ERROR: "bold red",
}


def _build_sdk(
    api_key: str,
    base_url: str,
    provider_call_id: str | None,
) -> NuorbitSdk:
    return NuorbitSdk.from_settings(
        config,
        api_key=api_key,
        base_url=base_url,
        default_provider_call_id=provider_call_id or config.default_provider_call_id,
    )


def _print_event(event: FlowEvent) -> None:
    style = _EVENT_STYLES.get(event.type, "white")
    parts = [f"[{style}]{event.type.value}[/{style}]"]
    if event.session is not None:
        parts.append(f"status={event.session.status.value}")
    if event.tx_hash:
        parts.append(f"tx={event.tx_hash}")
    if event.payload is not None:
        parts.append(f"amount={event.payload.amount_atomic} {event.payload.symbol}")
    if event.error is not None:
        parts.append(f"error={event.error}")
    console.print("  " + "  ".join(parts))


def _load_request(path: Path, flow_mode: FlowMode | None) -> SessionRequest:
    data = json.loads(path.read_text(encoding="utf-8"))
    request = SessionRequest.model_validate(data)
    if flow_mode is not None:
        request = request.model_copy(update={"flow_mode": flow_mode})
    return request


def run_cmd(
    request_file: Path = typer.Option(
        ...,
        "--request",
        "-r",
        exists=True,
        dir_okay=False,
        help="JSON file with the session-creation parameters.",
    ),
    transfer_tx: str = typer.Option(
        ...,
        "--transfer-tx",
        "-t",
        help="Hash of the already-submitted source-chain transfer.",
    ),
    flow_mode: FlowMode = typer.Option(
        None,
        "--flow-mode",
        "-f",
        help="Override the flow mode from the request file.",
    ),
    provider_call_id: str = typer.Option(
        None,
        "--provider-call-id",
        help="Provider-call template for cross-chain execution.",
    ),
    step_delay_ms: int = typer.Option(
        config.step_delay_ms, "--step-delay-ms", help="Pause between steps (ms)."
    ),
    proof_delay_ms: int = typer.Option(
        config.proof_delay_ms, "--proof-delay-ms", help="Pause before fetching the proof (ms)."
    ),
    api_key: str = typer.Option(
        config.api_key, "--api-key", help="API credential (defaults to NUORBIT_API_KEY)."
    ),
    base_url: str = typer.Option(
        config.base_url, "--base-url", help="API base URL (defaults to NUORBIT_BASE_URL)."
    ),
) -> None:
    """Run a full session flow and print every lifecycle event."""
    try:
        request = _load_request(request_file, flow_mode)
    except (ValueError, ValidationError) as exc:
        console.print(f"[red]Invalid request file:[/red] {exc}")
        raise typer.Exit(code=1)

    recorder = EventRecorder()
    sink = EventDispatcher(recorder, _print_event)

    async def _run() -> FlowResult:
        async with _build_sdk(api_key, base_url, provider_call_id) as sdk:
            return await sdk.run_flow(
                request,
                transfer_tx_hash=transfer_tx,
                on_event=sink,
                step_delay_ms=step_delay_ms,
                proof_delay_ms=proof_delay_ms,
            )

    console.print()
    try:
        result = asyncio.run(_run())
    except ConfigurationError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(code=1)
    except Exception as exc:  # noqa: BLE001
        console.print(f"[red]Flow failed:[/red] {exc}")
        raise typer.Exit(code=1)

    console.print()
    console.print(
        Panel(
            "\n".join([
                "[bold green]Session completed[/bold green]",
                "",
                f"[bold]Session ID:[/bold]   {result.session.session_id}",
                f"[bold]Flow mode:[/bold]    {result.session.flow_mode.value}",
                f"[bold]Status:[/bold]       {result.session.status.value}",
                f"[bold]Transfer tx:[/bold]  {result.transfer_tx or '-'}",
                f"[bold]Registry tx:[/bold]  {result.registry_tx or '-'}",
                f"[bold]Events:[/bold]       {len(recorder)}",
            ]),
            title="[bold]NuOrbit[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
