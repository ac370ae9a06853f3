"""NuOrbit: client-side payment session handshake and orchestration.

- Checkout popup launcher with a first-settle race between the popup's
  outcome message and closure detection
- Session orchestrator driving the remote session lifecycle
  (create -> confirm transfer -> execute/proof -> complete)
- Async session client over httpx, env-driven config via pydantic-settings
"""

__version__ = "0.2.0"
__description__ = "NuOrbit payment client: checkout handshake and session flow orchestration"

from nuorbit.checkout import launch_checkout
from nuorbit.config import ConfigurationError
from nuorbit.core.orchestrator import FlowOrchestrator
from nuorbit.core.session_client import SessionClient
from nuorbit.sdk import NuorbitSdk

__all__ = [
    "NuorbitSdk",
    "SessionClient",
    "FlowOrchestrator",
    "launch_checkout",
    "ConfigurationError",
    "__version__",
]
