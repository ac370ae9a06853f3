"""``nuorbit chains`` — list chains that support a stablecoin."""

from __future__ import annotations

import json
from pathlib import Path

import typer
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.table import Table

from nuorbit.core.chains import list_supported_chains
from nuorbit.models.chains import ChainConfig, StableSymbol
from nuorbit.models.session import FlowMode

console = Console()

_DIRECTORY = TypeAdapter(list[ChainConfig])


def chains_cmd(
    directory: Path = typer.Option(
        ...,
        "--directory",
        "-d",
        exists=True,
        dir_okay=False,
        help="JSON file holding the chain directory (a list of chains).",
    ),
    stable: StableSymbol = typer.Option(
        StableSymbol.USDC, "--stable", "-s", help="Stablecoin symbol."
    ),
    flow: FlowMode = typer.Option(
        FlowMode.CROSS_CHAIN, "--flow", help="Flow mode to filter for."
    ),
    receivers: Path = typer.Option(
        None,
        "--receivers",
        exists=True,
        dir_okay=False,
        help='JSON object mapping "chainId:STABLE" to a direct receiver address.',
    ),
) -> None:
    """Show the chains that can carry a payment in the given stablecoin."""
    try:
        chains = _DIRECTORY.validate_json(directory.read_bytes())
        receiver_map = (
            json.loads(receivers.read_text(encoding="utf-8")) if receivers else {}
        )
    except (ValueError, ValidationError) as exc:
        console.print(f"[red]Invalid chain directory:[/red] {exc}")
        raise typer.Exit(code=1)

    supported = list_supported_chains(
        stable, flow, chains=chains, direct_receivers=receiver_map
    )
    if not supported:
        console.print(f"[dim]No chains support {stable.value} for {flow.value}.[/dim]")
        return

    table = Table(title=f"{stable.value} chains ({flow.value})")
    table.add_column("ID", style="cyan")
    table.add_column("Chain ID", justify="right")
    table.add_column("Label")
    table.add_column("Token address")
    table.add_column("Decimals", justify="right")
    table.add_column("Testnet", justify="center")
    table.add_column("Direct receiver")

    for chain in supported:
        table.add_row(
            chain.id,
            str(chain.chain_id),
            chain.label,
            chain.address,
            str(chain.decimals),
            "[yellow]Yes[/yellow]" if chain.testnet else "No",
            chain.direct_receiver or "-",
        )

    console.print(table)
