"""Tests for the Tebex adapter against a local aiohttp server."""

import asyncio

import pytest
from aiohttp import web
from aiohttp import test_utils
from purchases.gateway import tebex_adapter
from purchases.gateway.port import GatewayError
from purchases.gateway.tebex_adapter import TebexGateway

SECRET = "plugin-secret"


def _store_app(seen):
    async def payment(request):
        seen.append(("payment", request.match_info["payment_id"], request.headers.get("X-Tebex-Secret")))
        if request.headers.get("X-Tebex-Secret") != SECRET:
            return web.json_response({"error_message": "Invalid secret"}, status=403)
        if request.match_info["payment_id"] != "tbx-1":
            return web.json_response({"error_code": 404}, status=404)
        return web.json_response({"id": "tbx-1", "packages": [{"id": 7, "name": "VIP Rank"}]})

    async def payments(request):
        seen.append(("payments", request.query.get("limit"), request.headers.get("X-Tebex-Secret")))
        return web.json_response([{"id": "tbx-2"}, {"id": "tbx-1"}])

    async def categories(request):
        seen.append(("categories", request.match_info["webstore_id"], request.query.get("includePackages")))
        return web.json_response(
            {
                "data": [
                    {"id": 1, "packages": [{"id": 7, "name": "VIP Rank", "image": "https://cdn.example.com/vip.png"}]},
                    {"id": 2, "packages": [{"id": 8, "name": "MVP Rank", "image": None}]},
                ]
            }
        )

    app = web.Application()
    app.router.add_get("/payments/{payment_id}", payment)
    app.router.add_get("/payments", payments)
    app.router.add_get("/accounts/{webstore_id}/categories", categories)
    return app


@pytest.fixture()
def run_against_store(monkeypatch):
    """Run a coroutine factory against a local Tebex stand-in; return its result and the requests seen."""

    def _run(action, secret=SECRET, webstore_id="store-1"):
        seen = []

        async def _main():
            server = test_utils.TestServer(_store_app(seen))
            await server.start_server()
            base = str(server.make_url("")).rstrip("/")
            monkeypatch.setattr(tebex_adapter, "PLUGIN_API_URL", base)
            monkeypatch.setattr(tebex_adapter, "HEADLESS_API_URL", base)
            gateway = TebexGateway(secret, webstore_id)
            try:
                return await action(gateway)
            finally:
                await gateway.close()
                await server.close()

        return asyncio.run(_main()), seen

    return _run


class TestTebexGateway:
    def test_fetch_payment_sends_secret(self, run_against_store):
        payment, seen = run_against_store(lambda g: g.fetch_payment("tbx-1"))
        assert payment["id"] == "tbx-1"
        assert seen == [("payment", "tbx-1", SECRET)]

    def test_http_error_raises_gateway_error(self, run_against_store):
        async def _missing(gateway):
            with pytest.raises(GatewayError) as exc:
                await gateway.fetch_payment("tbx-404")
            return str(exc.value)

        message, _ = run_against_store(_missing)
        assert "HTTP 404" in message

    def test_bad_secret_raises_gateway_error(self, run_against_store):
        async def _forbidden(gateway):
            with pytest.raises(GatewayError):
                await gateway.fetch_payment("tbx-1")

        run_against_store(_forbidden, secret="wrong")

    def test_payment_id_stays_inside_payment_path(self, run_against_store):
        async def _escaped(gateway):
            with pytest.raises(GatewayError):
                await gateway.fetch_payment("../information")

        _, seen = run_against_store(_escaped)
        assert len(seen) == 1
        assert seen[0][0] == "payment"

    def test_payment_id_query_characters_are_escaped(self, run_against_store):
        async def _escaped(gateway):
            with pytest.raises(GatewayError):
                await gateway.fetch_payment("tbx?1")

        _, seen = run_against_store(_escaped)
        assert seen == [("payment", "tbx?1", SECRET)]

    def test_recent_payments_limit(self, run_against_store):
        recent, seen = run_against_store(lambda g: g.fetch_recent_payments(limit=100))
        assert [p["id"] for p in recent] == ["tbx-2", "tbx-1"]
        assert seen == [("payments", "100", SECRET)]

    def test_packages_flattened_from_categories(self, run_against_store):
        packages, seen = run_against_store(lambda g: g.fetch_packages())
        assert [(p["name"], p["image"]) for p in packages] == [
            ("VIP Rank", "https://cdn.example.com/vip.png"),
            ("MVP Rank", None),
        ]
        assert seen == [("categories", "store-1", "1")]

    def test_no_webstore_means_empty_catalogue(self, run_against_store):
        packages, seen = run_against_store(lambda g: g.fetch_packages(), webstore_id=None)
        assert packages == []
        assert seen == []

    def test_unreachable_store_raises_gateway_error(self):
        async def _main():
            gateway = TebexGateway(SECRET)
            try:
                await gateway._get_json("http://127.0.0.1:9/payments", timeout=1)
            finally:
                await gateway.close()

        with pytest.raises(GatewayError):
            asyncio.run(_main())
