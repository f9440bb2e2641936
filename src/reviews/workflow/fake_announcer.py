"""Fake announcer — records announcements in memory for test assertions."""

import asyncio
from uuid import uuid4

from reviews.workflow.announcement import Announcer, ReviewAnnouncement
from reviews.workflow.errors import AnnouncementChannelUnavailable


class FakeAnnouncer(Announcer):
    def __init__(self) -> None:
        self.published: dict[str, ReviewAnnouncement] = {}
        self.retracted: list[str] = []
        self.channel_available = True

    async def publish(self, announcement: ReviewAnnouncement) -> str:
        # Yield like a real network send would
        await asyncio.sleep(0)
        if not self.channel_available:
            raise AnnouncementChannelUnavailable()

        message_id = f"msg-{uuid4().hex[:12]}"
        self.published[message_id] = announcement
        return message_id

    async def retract(self, message_id: str) -> None:
        await asyncio.sleep(0)
        self.published.pop(message_id, None)
        self.retracted.append(message_id)
