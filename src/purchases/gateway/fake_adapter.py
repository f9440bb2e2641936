"""Configurable fake storefront gateway for development and testing.

This adapter simulates the Tebex APIs without any external calls.
It can be loaded with payments and catalogue packages and configured to
fail, making it useful for:
- Automated tests with predictable outcomes
- Running the bot locally without store credentials
"""

from typing import Any

from purchases.gateway.port import GatewayError, StoreGateway


class FakeGateway(StoreGateway):
    """Configurable fake storefront gateway."""

    def __init__(self) -> None:
        self.payments: dict[str, dict[str, Any]] = {}
        self.recent_payments: list[dict[str, Any]] = []
        self.packages: list[dict[str, Any]] = []
        self.direct_lookup_fails: bool = False
        self.unreachable: bool = False
        self.calls: list[dict] = []

    def add_payment(self, payment: dict[str, Any], direct: bool = True, recent: bool = True) -> None:
        """Register a raw payment payload for the direct and/or recent lookups."""
        if direct:
            self.payments[str(payment["id"])] = payment
        if recent:
            self.recent_payments.insert(0, payment)

    def add_package(self, name: str, image: str | None = None, package_id: int | None = None) -> None:
        self.packages.append({"id": package_id or len(self.packages) + 1, "name": name, "image": image})

    def configure(self, direct_lookup_fails: bool = False, unreachable: bool = False) -> None:
        """Configure gateway behavior at runtime."""
        self.direct_lookup_fails = direct_lookup_fails
        self.unreachable = unreachable

    async def fetch_payment(self, payment_id: str) -> dict[str, Any]:
        self.calls.append({"method": "fetch_payment", "payment_id": payment_id})

        if self.unreachable or self.direct_lookup_fails:
            raise GatewayError("Direct payment lookup failed")
        if payment_id not in self.payments:
            raise GatewayError(f"Payment {payment_id} not found")
        return self.payments[payment_id]

    async def fetch_recent_payments(self, limit: int = 100) -> list[dict[str, Any]]:
        self.calls.append({"method": "fetch_recent_payments", "limit": limit})

        if self.unreachable:
            raise GatewayError("Storefront unreachable")
        return self.recent_payments[:limit]

    async def fetch_packages(self) -> list[dict[str, Any]]:
        self.calls.append({"method": "fetch_packages"})

        if self.unreachable:
            raise GatewayError("Catalogue unreachable")
        return list(self.packages)

    def reset(self) -> None:
        """Clear payments, packages and recorded calls (useful between tests)."""
        self.__init__()
