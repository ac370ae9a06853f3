"""Chain directory filtering."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from nuorbit.models.chains import ChainConfig, StableSymbol, SupportedChain
from nuorbit.models.session import FlowMode


def direct_receiver_key(chain_id: int, stable: StableSymbol | str) -> str:
    """Key into the direct-receiver map: ``"{chain_id}:{stable}"``."""
    symbol = stable.value if isinstance(stable, StableSymbol) else stable
    return f"{chain_id}:{symbol}"


def list_supported_chains(
    stable: StableSymbol | str,
    flow: FlowMode | str = FlowMode.CROSS_CHAIN,
    *,
    chains: Iterable[ChainConfig] = (),
    direct_receivers: Mapping[str, str] | None = None,
) -> list[SupportedChain]:
    """Chains that carry *stable*, flattened with that stablecoin's details.

    In the direct-proof flow a chain is only listed when a direct receiver
    is configured for it.
    """
    symbol = StableSymbol(stable)
    mode = FlowMode(flow)
    receivers = direct_receivers or {}

    supported: list[SupportedChain] = []
    for chain in chains:
        stablecoin = chain.stablecoins.get(symbol)
        if stablecoin is None:
            continue
        receiver = receivers.get(direct_receiver_key(chain.chain_id, symbol))
        if mode == FlowMode.DIRECT_PROOF and not receiver:
            continue
        supported.append(
            SupportedChain(
                id=chain.id,
                chain_id=chain.chain_id,
                label=chain.label,
                testnet=bool(chain.testnet),
                symbol=stablecoin.symbol,
                address=stablecoin.address,
                decimals=stablecoin.decimals,
                direct_receiver=receiver,
            )
        )
    return supported
