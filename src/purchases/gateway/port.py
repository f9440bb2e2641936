"""Storefront gateway port (abstract interface).

Defines the contract that all storefront adapters must implement. This
enables swapping between FakeGateway (dev/test) and TebexGateway
(production) without changing the verifier or the review workflow.
"""

from abc import ABC, abstractmethod
from typing import Any


class GatewayError(Exception):
    """The storefront could not be reached or answered with an error."""


class StoreGateway(ABC):
    """Abstract storefront gateway interface."""

    @abstractmethod
    async def fetch_payment(self, payment_id: str) -> dict[str, Any]:
        """Fetch a single payment by its identifier."""
        ...

    @abstractmethod
    async def fetch_recent_payments(self, limit: int = 100) -> list[dict[str, Any]]:
        """Fetch the most recent payments, newest first."""
        ...

    @abstractmethod
    async def fetch_packages(self) -> list[dict[str, Any]]:
        """Fetch every package listed in the public catalogue."""
        ...

    async def close(self) -> None:
        """Release any network resources held by the adapter."""
        return None
