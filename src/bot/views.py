"""Discord UI for the review flow.

Each component translates one interaction into one workflow step and
renders the outcome. ReviewFlowErrors become ephemeral error embeds;
anything else is logged and answered with a generic error.
"""

import discord
import structlog

from bot.config import Settings
from bot.embeds import error_embed, payment_embed, success_embed
from reviews.utils.logging import add_context, clear_context
from reviews.workflow.errors import ReviewFlowError
from reviews.workflow.flow import (
    TRANSACTION_ID_MAX_LENGTH,
    TRANSACTION_ID_MIN_LENGTH,
    Reviewer,
    ReviewForm,
    ReviewWorkflow,
)

logger = structlog.get_logger(__name__)

REVIEW_ACTION_CUSTOM_ID = "open_review_modal"
SUBMIT_REVIEW_OPTION = "submit_review"


async def _send(interaction: discord.Interaction, embed: discord.Embed) -> None:
    if interaction.response.is_done():
        await interaction.followup.send(embed=embed, ephemeral=True)
    else:
        await interaction.response.send_message(embed=embed, ephemeral=True)


async def send_flow_error(interaction: discord.Interaction, error: ReviewFlowError, settings: Settings) -> None:
    embed = error_embed(interaction.user, interaction.guild, error.title, error.description, settings)
    await _send(interaction, embed)


async def send_generic_error(interaction: discord.Interaction, settings: Settings) -> None:
    """Answer an interaction that failed unexpectedly. Never raises."""
    try:
        await send_flow_error(interaction, ReviewFlowError(), settings)
    except discord.HTTPException as exc:
        logger.warning("Could not deliver error message", interaction_id=interaction.id, error=str(exc))


def bind_interaction(interaction: discord.Interaction, **extra) -> None:
    """Scope log context to one interaction."""
    clear_context()
    add_context(user_id=str(interaction.user.id), interaction_id=str(interaction.id), **extra)


def _reviewer(user: discord.abc.User) -> Reviewer:
    return Reviewer(
        user_id=str(user.id),
        name=user.name,
        avatar_url=user.display_avatar.replace(size=256, format="png").url,
    )


class TransactionModal(discord.ui.Modal, title="Create Product Review"):
    transaction_id = discord.ui.TextInput(
        label="Transaction ID",
        placeholder="Ex: tbx-123...",
        style=discord.TextStyle.short,
        required=True,
        min_length=TRANSACTION_ID_MIN_LENGTH,
        max_length=TRANSACTION_ID_MAX_LENGTH,
    )

    def __init__(self, workflow: ReviewWorkflow, settings: Settings) -> None:
        super().__init__(custom_id="transaction_id_modal")
        self.workflow = workflow
        self.settings = settings

    async def on_submit(self, interaction: discord.Interaction) -> None:
        bind_interaction(interaction, transaction_id=self.transaction_id.value.strip())
        await interaction.response.defer(ephemeral=True, thinking=True)
        try:
            purchase = await self.workflow.submit_transaction(str(interaction.user.id), self.transaction_id.value)
        except ReviewFlowError as exc:
            await send_flow_error(interaction, exc, self.settings)
            return

        embed = payment_embed(interaction.user, interaction.guild, purchase.payment, purchase.product_image, self.settings)
        await interaction.followup.send(
            embed=embed,
            view=ReviewActionView(self.workflow, self.settings),
            ephemeral=True,
        )

    async def on_error(self, interaction: discord.Interaction, error: Exception) -> None:
        logger.exception("Transaction form failed", user_id=interaction.user.id, exc_info=error)
        await send_generic_error(interaction, self.settings)


class ReviewContentModal(discord.ui.Modal, title="Write Your Review"):
    def __init__(self, workflow: ReviewWorkflow, settings: Settings, form: ReviewForm) -> None:
        super().__init__(custom_id="review_content_modal")
        self.workflow = workflow
        self.settings = settings

        self.product_name = discord.ui.TextInput(
            label="Product Name (Cannot be changed)",
            default=form.product_name,
            style=discord.TextStyle.short,
            required=True,
        )
        self.review_text = discord.ui.TextInput(
            label="Review Description",
            placeholder="Share your experience with this product...",
            style=discord.TextStyle.paragraph,
            required=True,
            min_length=form.review_min_length,
            max_length=form.review_max_length,
        )
        self.rating = discord.ui.TextInput(
            label="Rating (1-5 stars)",
            placeholder="Enter a number between 1 and 5",
            style=discord.TextStyle.short,
            required=True,
            min_length=1,
            max_length=form.rating_max_length,
        )
        self.add_item(self.product_name)
        self.add_item(self.review_text)
        self.add_item(self.rating)

    async def on_submit(self, interaction: discord.Interaction) -> None:
        bind_interaction(interaction)
        await interaction.response.defer(ephemeral=True, thinking=True)
        try:
            await self.workflow.submit_review(
                _reviewer(interaction.user),
                product_name=self.product_name.value,
                review_text=self.review_text.value,
                rating_input=self.rating.value,
            )
        except ReviewFlowError as exc:
            await send_flow_error(interaction, exc, self.settings)
            return

        embed = success_embed(
            interaction.user,
            interaction.guild,
            "Review Submitted",
            "Your review has been submitted successfully! Thank you for your feedback.",
            self.settings,
        )
        await interaction.followup.send(embed=embed, ephemeral=True)

    async def on_error(self, interaction: discord.Interaction, error: Exception) -> None:
        logger.exception("Review form failed", user_id=interaction.user.id, exc_info=error)
        await send_generic_error(interaction, self.settings)


class ReviewActionView(discord.ui.View):
    """Persistent action menu attached to the purchase summary."""

    def __init__(self, workflow: ReviewWorkflow, settings: Settings) -> None:
        super().__init__(timeout=None)
        self.workflow = workflow
        self.settings = settings

    @discord.ui.select(
        custom_id=REVIEW_ACTION_CUSTOM_ID,
        placeholder="Select an action...",
        options=[
            discord.SelectOption(
                label="Submit Review",
                description="Write a review for this product",
                value=SUBMIT_REVIEW_OPTION,
                emoji="📝",
            )
        ],
    )
    async def choose_action(self, interaction: discord.Interaction, select: discord.ui.Select) -> None:
        bind_interaction(interaction)
        try:
            form = self.workflow.open_review_form(str(interaction.user.id))
        except ReviewFlowError as exc:
            # A dead session cannot be resumed; drop the menu
            await interaction.response.edit_message(view=None)
            await send_flow_error(interaction, exc, self.settings)
            return

        await interaction.response.send_modal(ReviewContentModal(self.workflow, self.settings, form))

    async def on_error(self, interaction: discord.Interaction, error: Exception, item: discord.ui.Item) -> None:
        logger.exception("Review action failed", user_id=interaction.user.id, exc_info=error)
        await send_generic_error(interaction, self.settings)
