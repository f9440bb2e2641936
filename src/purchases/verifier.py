"""PurchaseVerifier — resolve a transaction identifier to a payment record.

The direct lookup by id is tried first. Some identifier formats (basket
idents, for instance) are rejected by that endpoint, so on any miss the
verifier falls back to scanning the most recent payments for an exact id
match.

Verification fails closed: every gateway failure is reported as "not
found" and nothing is raised to the caller. Outages are logged at warning
level so operators can tell them apart from genuine misses.
"""

import structlog

from purchases.gateway import get_gateway
from purchases.gateway.port import GatewayError, StoreGateway
from purchases.payment import PaymentRecord

logger = structlog.get_logger(__name__)

RECENT_PAYMENTS_LIMIT = 100


class PurchaseVerifier:
    def __init__(self, gateway: StoreGateway | None = None) -> None:
        self.gateway = gateway or get_gateway()

    async def verify(self, transaction_id: str) -> PaymentRecord | None:
        """Return the payment behind `transaction_id`, or None if it cannot be found."""
        payment_id = transaction_id.strip()

        try:
            raw = await self.gateway.fetch_payment(payment_id)
            if isinstance(raw, dict) and raw.get("id"):
                payment = self._parse(raw, payment_id)
                if payment is not None:
                    return payment
        except GatewayError as exc:
            logger.info("Direct payment lookup failed, searching recent payments", transaction_id=payment_id, error=str(exc))

        try:
            recent = await self.gateway.fetch_recent_payments(limit=RECENT_PAYMENTS_LIMIT)
        except GatewayError as exc:
            logger.warning("Storefront unreachable during verification", transaction_id=payment_id, error=str(exc))
            return None

        for raw in recent or []:
            if not isinstance(raw, dict):
                continue
            if raw.get("id") is not None and str(raw["id"]) == payment_id:
                payment = self._parse(raw, payment_id)
                if payment is not None:
                    return payment

        logger.info("Payment not found", transaction_id=payment_id)
        return None

    @staticmethod
    def _parse(raw: dict, payment_id: str) -> PaymentRecord | None:
        try:
            return PaymentRecord.from_tebex(raw)
        except (KeyError, TypeError, AttributeError, ValueError) as exc:
            logger.warning("Malformed payment payload", transaction_id=payment_id, error=str(exc))
            return None

    async def find_product_image(self, product_name: str) -> str | None:
        """Look up a catalogue image for a package by case-insensitive exact name."""
        try:
            packages = await self.gateway.fetch_packages()
        except GatewayError as exc:
            logger.warning("Catalogue lookup failed", product_name=product_name, error=str(exc))
            return None

        wanted = product_name.lower()
        for package in packages or []:
            if not isinstance(package, dict):
                continue
            if (package.get("name") or "").lower() == wanted:
                return package.get("image") or None
        return None
