"""NuOrbit data models — all Pydantic v2, all frozen (immutable)."""

from nuorbit.models.chains import (
    ChainConfig,
    StablecoinConfig,
    StableSymbol,
    SupportedChain,
)
from nuorbit.models.checkout import (
    CheckoutCancelled,
    CheckoutFailure,
    CheckoutOptions,
    CheckoutPending,
    CheckoutResult,
    CheckoutSuccess,
)
from nuorbit.models.flow import (
    FlowEvent,
    FlowEventType,
    FlowResult,
    SessionRequest,
    TransferRequest,
)
from nuorbit.models.provider_calls import (
    ProviderCallKind,
    ProviderCallTemplate,
    is_registry_provider_call,
)
from nuorbit.models.routes import SdkRoutes
from nuorbit.models.session import (
    STATUS_ORDER,
    Completion,
    ContractCall,
    FlowMode,
    PendingProof,
    Permit,
    PermitTypedData,
    Proof,
    Session,
    SessionResponse,
    SessionStatus,
)

__all__ = [
    # session
    "FlowMode",
    "SessionStatus",
    "STATUS_ORDER",
    "Session",
    "SessionResponse",
    "Permit",
    "PermitTypedData",
    "ContractCall",
    "Proof",
    "PendingProof",
    "Completion",
    # checkout
    "CheckoutOptions",
    "CheckoutResult",
    "CheckoutSuccess",
    "CheckoutPending",
    "CheckoutFailure",
    "CheckoutCancelled",
    # flow
    "SessionRequest",
    "TransferRequest",
    "FlowEvent",
    "FlowEventType",
    "FlowResult",
    # chains
    "StableSymbol",
    "StablecoinConfig",
    "ChainConfig",
    "SupportedChain",
    # provider calls
    "ProviderCallKind",
    "ProviderCallTemplate",
    "is_registry_provider_call",
    # routes
    "SdkRoutes",
]
