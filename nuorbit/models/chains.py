"""Chain directory models — which stablecoins live on which chains."""

from __future__ import annotations

from enum import Enum

from nuorbit.models.session import WireModel


class StableSymbol(str, Enum):
    USDC = "USDC"
    USDT = "USDT"


class StablecoinConfig(WireModel):
    symbol: StableSymbol
    address: str
    decimals: int


class ChainConfig(WireModel):
    """One chain in the directory and the stablecoins deployed on it."""

    id: str
    label: str
    chain_id: int
    testnet: bool = False
    stablecoins: dict[StableSymbol, StablecoinConfig] = {}


class SupportedChain(StablecoinConfig):
    """A chain flattened together with one of its stablecoins."""

    id: str
    chain_id: int
    label: str
    testnet: bool
    direct_receiver: str | None = None
