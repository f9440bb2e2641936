"""Discord announcer — posts accepted reviews to the review display channel."""

import discord
import structlog

from bot.config import Settings
from bot.embeds import review_embed
from reviews.workflow.announcement import Announcer, ReviewAnnouncement
from reviews.workflow.errors import AnnouncementChannelUnavailable

logger = structlog.get_logger(__name__)


class ChannelAnnouncer(Announcer):
    def __init__(self, client: discord.Client, settings: Settings) -> None:
        self.client = client
        self.settings = settings

    async def _channel(self) -> discord.abc.Messageable:
        channel_id = self.settings.channels.review_display
        if channel_id is None:
            logger.error("Review display channel is not configured")
            raise AnnouncementChannelUnavailable()

        channel = self.client.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self.client.fetch_channel(channel_id)
            except (discord.NotFound, discord.Forbidden) as exc:
                logger.error("Review display channel unavailable", channel_id=channel_id, error=str(exc))
                raise AnnouncementChannelUnavailable() from exc
        return channel

    async def publish(self, announcement: ReviewAnnouncement) -> str:
        channel = await self._channel()
        message = await channel.send(embed=review_embed(announcement, self.settings))
        logger.info("Review announced", channel_id=channel.id, message_id=message.id)
        return str(message.id)

    async def retract(self, message_id: str) -> None:
        channel = await self._channel()
        try:
            message = await channel.fetch_message(int(message_id))
            await message.delete()
        except discord.NotFound:
            logger.info("Announcement already gone", message_id=message_id)
            return
        except discord.HTTPException as exc:
            logger.error("Announcement could not be deleted", channel_id=channel.id, message_id=message_id, error=str(exc))
            return
        logger.info("Announcement retracted", channel_id=channel.id, message_id=message_id)
