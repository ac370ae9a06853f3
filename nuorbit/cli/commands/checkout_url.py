"""``nuorbit checkout-url`` — preview the checkout popup URL."""

from __future__ import annotations

import typer
from rich.console import Console

from nuorbit.checkout.url import build_checkout_url, origin_of
from nuorbit.config import ConfigurationError, config
from nuorbit.models.checkout import CheckoutOptions
from nuorbit.models.session import FlowMode

console = Console()


def checkout_url_cmd(
    origin: str = typer.Option(
        "http://localhost:3000", "--origin", help="Origin of the embedding page."
    ),
    base_url: str = typer.Option(None, "--base-url", help="Checkout host (defaults to the origin)."),
    path: str = typer.Option(config.checkout_path, "--path", help="Checkout route."),
    price: str = typer.Option(None, "--price", help="Price in USD."),
    pay_to: str = typer.Option(None, "--pay-to", help="Pay-to address."),
    description: str = typer.Option(None, "--description", help="Description shown in the checkout."),
    prefill_network: str = typer.Option(None, "--network", help="Preselected source network."),
    prefill_stable: str = typer.Option(None, "--stable", help="Preselected stablecoin."),
    flow_mode: FlowMode = typer.Option(None, "--flow-mode", help="Preselected flow mode."),
) -> None:
    """Print the URL ``launch_checkout`` would open for these options."""
    options = CheckoutOptions(
        base_url=base_url,
        path=path,
        price_usd=price,
        pay_to=pay_to,
        description=description,
        prefill_network=prefill_network,
        prefill_stable=prefill_stable,
        flow_mode=flow_mode,
    )
    try:
        url = build_checkout_url(options, origin=origin_of(origin), href=origin)
    except ConfigurationError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(code=1)

    # Plain output for scripting
    typer.echo(url)
