"""Storefront gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing
- TebexGateway for production
"""

from purchases.gateway.fake_adapter import FakeGateway
from purchases.gateway.port import StoreGateway

_current_gateway: StoreGateway | None = None


def get_gateway() -> StoreGateway:
    """Return the current storefront gateway. Defaults to FakeGateway."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = FakeGateway()
    return _current_gateway


def set_gateway(gateway: StoreGateway) -> None:
    """Override the active storefront gateway."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
