"""The `/review` command and the session reaper."""

import discord
import structlog
from discord import app_commands
from discord.ext import commands, tasks

from bot.config import Settings
from bot.views import TransactionModal, bind_interaction
from reviews.workflow.flow import ReviewWorkflow
from reviews.workflow.sessions import SessionStore

logger = structlog.get_logger(__name__)

REAPER_INTERVAL_SECONDS = 60


class ReviewCog(commands.Cog):
    def __init__(
        self,
        bot: commands.Bot,
        workflow: ReviewWorkflow,
        sessions: SessionStore,
        settings: Settings,
    ) -> None:
        self.bot = bot
        self.workflow = workflow
        self.sessions = sessions
        self.settings = settings

    async def cog_load(self) -> None:
        self.reap_sessions.start()

    async def cog_unload(self) -> None:
        self.reap_sessions.cancel()

    @app_commands.command(name="review", description="Create a review for your store purchase")
    async def review(self, interaction: discord.Interaction) -> None:
        bind_interaction(interaction)
        logger.info("Review started", guild_id=interaction.guild_id)
        await interaction.response.send_modal(TransactionModal(self.workflow, self.settings))

    @tasks.loop(seconds=REAPER_INTERVAL_SECONDS)
    async def reap_sessions(self) -> None:
        removed = self.sessions.purge_expired()
        if removed:
            logger.debug("Expired review sessions purged", count=removed)

    @reap_sessions.error
    async def _reaper_failed(self, error: BaseException) -> None:
        logger.error("Session reaper stopped", error=str(error))
