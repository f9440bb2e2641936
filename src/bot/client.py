"""ReviewBot — the Discord client wiring the review workflow together."""

import discord
import structlog
from discord import app_commands
from discord.ext import commands

from bot.announcer import ChannelAnnouncer
from bot.cog import ReviewCog
from bot.config import Settings
from bot.views import ReviewActionView, send_generic_error
from purchases.gateway.port import StoreGateway
from purchases.verifier import PurchaseVerifier
from reviews.workflow.flow import ReviewWorkflow
from reviews.workflow.sessions import InMemorySessionStore, SessionStore

logger = structlog.get_logger(__name__)


class ReviewBot(commands.Bot):
    def __init__(
        self,
        settings: Settings,
        gateway: StoreGateway,
        guild_id: int | None = None,
        sessions: SessionStore | None = None,
    ) -> None:
        super().__init__(command_prefix=commands.when_mentioned, intents=discord.Intents(guilds=True))
        self.settings = settings
        self.gateway = gateway
        self.guild_id = guild_id
        self.sessions = sessions or InMemorySessionStore()
        self.workflow = ReviewWorkflow(
            sessions=self.sessions,
            verifier=PurchaseVerifier(gateway),
            announcer=ChannelAnnouncer(self, settings),
        )
        self.tree.on_error = self.on_app_command_error

    async def setup_hook(self) -> None:
        await self.add_cog(ReviewCog(self, self.workflow, self.sessions, self.settings))
        self.add_view(ReviewActionView(self.workflow, self.settings))

        try:
            if self.guild_id is not None:
                guild = discord.Object(id=self.guild_id)
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
            else:
                synced = await self.tree.sync()
        except discord.HTTPException as exc:
            logger.error("Command sync failed", guild_id=self.guild_id, error=str(exc))
        else:
            logger.info("Slash commands synced", guild_id=self.guild_id, count=len(synced))

    async def on_ready(self) -> None:
        logger.info("Bot is ready", user=str(self.user), guilds=len(self.guilds))

    async def on_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError,
    ) -> None:
        logger.exception(
            "Command failed",
            command=interaction.command.name if interaction.command else None,
            user_id=interaction.user.id,
            exc_info=error,
        )
        await send_generic_error(interaction, self.settings)

    async def close(self) -> None:
        await self.gateway.close()
        await super().close()
