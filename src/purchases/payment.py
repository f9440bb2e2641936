"""Payment records returned by the storefront.

Snapshots are immutable once fetched. Only the first line item is ever
treated as "the product" of a purchase.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class LineItem:
    """A purchased package."""

    id: str | None
    name: str
    quantity: int = 1
    image: str | None = None


@dataclass(frozen=True)
class PaymentRecord:
    """A verified purchase snapshot."""

    id: str
    amount: str | None = None
    currency: str = "USD"
    date: str | None = None
    player_name: str = "Unknown"
    player_id: str = "N/A"
    status: str | None = None
    line_items: tuple[LineItem, ...] = field(default_factory=tuple)

    @property
    def product(self) -> LineItem | None:
        return self.line_items[0] if self.line_items else None

    @classmethod
    def from_tebex(cls, raw: dict[str, Any]) -> "PaymentRecord":
        """Normalise a Plugin API payment payload."""
        currency = raw.get("currency") or {}
        if isinstance(currency, dict):
            currency_code = currency.get("iso_4217") or currency.get("symbol") or "USD"
        else:
            currency_code = str(currency)

        player = raw.get("player") or {}
        line_items = tuple(
            LineItem(
                id=str(pkg["id"]) if pkg.get("id") is not None else None,
                name=pkg.get("name") or "",
                quantity=pkg.get("quantity") or 1,
                image=pkg.get("image") or None,
            )
            for pkg in raw.get("packages") or []
        )

        return cls(
            id=str(raw["id"]),
            amount=str(raw["amount"]) if raw.get("amount") is not None else None,
            currency=currency_code,
            date=raw.get("date"),
            player_name=player.get("name") or "Unknown",
            player_id=str(player.get("id") or "N/A"),
            status=raw.get("status"),
            line_items=line_items,
        )
