"""Tests for the /review command and the session reaper."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

from bot.cog import ReviewCog
from bot.views import TransactionModal
from purchases.payment import PaymentRecord
from reviews.workflow.sessions import InMemorySessionStore


class _Clock:
    def __init__(self):
        self.now = 1_000.0

    def __call__(self):
        return self.now


def test_review_command_opens_transaction_form(settings, user):
    interaction = MagicMock()
    interaction.user = user
    interaction.response.send_modal = AsyncMock()

    async def _main():
        cog = ReviewCog(MagicMock(), MagicMock(), InMemorySessionStore(), settings)
        await cog.review.callback(cog, interaction)

    asyncio.run(_main())

    modal = interaction.response.send_modal.await_args.args[0]
    assert isinstance(modal, TransactionModal)
    assert modal.transaction_id.min_length == 5
    assert modal.transaction_id.max_length == 50


def test_reaper_purges_expired_sessions(settings):
    clock = _Clock()
    sessions = InMemorySessionStore(timeout=60, clock=clock)
    sessions.create("1001", "tbx-10001-a1b2", PaymentRecord(id="tbx-10001-a1b2"))
    clock.now += 120
    sessions.create("2002", "tbx-20002-c3d4", PaymentRecord(id="tbx-20002-c3d4"))

    cog = ReviewCog(MagicMock(), MagicMock(), sessions, settings)
    asyncio.run(cog.reap_sessions())

    assert sessions.get("1001") is None
    assert sessions.get("2002") is not None
