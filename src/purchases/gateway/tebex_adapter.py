"""Tebex storefront adapter.

Talks to two Tebex APIs:
- Plugin API (authenticated with the store's secret key) for payments
- Headless API (public, keyed by webstore id) for the package catalogue

Every transport or HTTP failure is raised as GatewayError so callers only
ever deal with one exception type.
"""

import asyncio
from typing import Any
from urllib.parse import quote

import aiohttp
import structlog

from purchases.gateway.port import GatewayError, StoreGateway

logger = structlog.get_logger(__name__)

PLUGIN_API_URL = "https://plugin.tebex.io"
HEADLESS_API_URL = "https://headless.tebex.io/api"

PAYMENT_LOOKUP_TIMEOUT = 5
DEFAULT_TIMEOUT = 15
USER_AGENT = "Tebex-Review-Bot/1.0"


class TebexGateway(StoreGateway):
    """Production Tebex adapter built on a shared aiohttp session."""

    def __init__(self, secret_key: str, webstore_id: str | None = None) -> None:
        self.secret_key = secret_key
        self.webstore_id = webstore_id
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=DEFAULT_TIMEOUT),
                headers={"User-Agent": USER_AGENT},
            )
        return self._session

    async def _get_json(self, url: str, headers: dict | None = None, params: dict | None = None, timeout: float | None = None):
        session = self._get_session()
        request_timeout = aiohttp.ClientTimeout(total=timeout) if timeout else None
        try:
            async with session.get(url, headers=headers, params=params, timeout=request_timeout) as resp:
                if resp.status != 200:
                    body = (await resp.text(errors="replace"))[:300]
                    raise GatewayError(f"{url} returned HTTP {resp.status}: {body}")
                return await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise GatewayError(f"{url} failed: {exc!r}") from exc

    def _plugin_headers(self) -> dict[str, str]:
        return {"X-Tebex-Secret": self.secret_key, "Content-Type": "application/json"}

    async def fetch_payment(self, payment_id: str) -> dict[str, Any]:
        data = await self._get_json(
            f"{PLUGIN_API_URL}/payments/{quote(payment_id, safe='')}",
            headers=self._plugin_headers(),
            timeout=PAYMENT_LOOKUP_TIMEOUT,
        )
        if not isinstance(data, dict):
            raise GatewayError(f"Unexpected payment payload for {payment_id}")
        return data

    async def fetch_recent_payments(self, limit: int = 100) -> list[dict[str, Any]]:
        data = await self._get_json(
            f"{PLUGIN_API_URL}/payments",
            headers=self._plugin_headers(),
            params={"limit": limit},
        )
        return data if isinstance(data, list) else []

    async def fetch_packages(self) -> list[dict[str, Any]]:
        if not self.webstore_id:
            logger.debug("No webstore id configured, catalogue lookup skipped")
            return []

        data = await self._get_json(
            f"{HEADLESS_API_URL}/accounts/{self.webstore_id}/categories",
            headers={"Accept": "application/json"},
            params={"includePackages": 1},
        )

        packages = []
        for category in (data or {}).get("data") or []:
            for package in category.get("packages") or []:
                packages.append(
                    {
                        "id": package.get("id"),
                        "name": package.get("name") or "",
                        "description": package.get("description"),
                        "price": package.get("total_price"),
                        "currency": package.get("currency"),
                        "image": package.get("image") or None,
                    }
                )
        return packages

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
