"""Provider-call templates — server-known on-chain execution routines."""

from __future__ import annotations

from enum import Enum

from nuorbit.models.session import WireModel


class ProviderCallKind(str, Enum):
    REGISTRY_PERMIT = "registry-permit"
    CUSTOM = "custom"


class ProviderCallTemplate(WireModel):
    """Selects which execution routine runs during a cross-chain flow."""

    id: str
    label: str
    description: str | None = None
    target_chain_id: int
    kind: ProviderCallKind
    registry_address: str | None = None


def is_registry_provider_call(template: ProviderCallTemplate) -> bool:
    """True when the template settles through a registry contract."""
    return (
        template.kind == ProviderCallKind.REGISTRY_PERMIT
        and isinstance(template.registry_address, str)
    )
