"""Remote route table for the NuOrbit session API."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

from nuorbit.config import ConfigurationError


class SdkRoutes(BaseModel):
    """Paths of the six remote operations. Override any subset."""

    model_config = ConfigDict(frozen=True)

    session: str = "/api/demo/nuorbit/session"
    transfer: str = "/api/demo/nuorbit/transfer"
    execute: str = "/api/demo/nuorbit/execute"
    proof: str = "/api/demo/nuorbit/proof"
    direct_proof: str = "/api/demo/nuorbit/direct-proof"
    complete: str = "/api/demo/nuorbit/complete"

    def merged(self, overrides: Mapping[str, str] | None) -> SdkRoutes:
        """Return a copy with *overrides* layered on top.

        Accepts both ``direct_proof`` and the wire spelling ``directProof``.
        Unknown keys raise ``ConfigurationError``.
        """
        if not overrides:
            return self
        update: dict[str, str] = {}
        for key, path in overrides.items():
            name = "direct_proof" if key == "directProof" else key
            if name not in type(self).model_fields:
                raise ConfigurationError(f"Unknown route: {key!r}")
            update[name] = path
        return self.model_copy(update=update)
