"""Embed builders for every message the bot sends."""

from datetime import datetime

import discord

from bot.config import Settings
from purchases.payment import PaymentRecord
from reviews.workflow.announcement import ReviewAnnouncement


def stars(rating: int, settings: Settings) -> str:
    return settings.emojis.star * rating


def _guild_icon(guild: discord.Guild | None) -> str | None:
    if guild is None or guild.icon is None:
        return None
    return guild.icon.url


def _format_date(value: str | None) -> str:
    if not value:
        return "Unknown"
    try:
        return datetime.fromisoformat(value).strftime("%Y-%m-%d")
    except ValueError:
        return value


def _branded(
    user: discord.abc.User,
    guild: discord.Guild | None,
    settings: Settings,
    color: int,
) -> discord.Embed:
    embed = discord.Embed(color=color)
    embed.set_author(name=user.name, icon_url=user.display_avatar.url)

    icon = _guild_icon(guild)
    embed.set_footer(text=settings.branding.footer, icon_url=icon)
    if icon:
        embed.set_thumbnail(url=icon)
    return embed


def error_embed(
    user: discord.abc.User,
    guild: discord.Guild | None,
    title: str,
    description: str,
    settings: Settings,
) -> discord.Embed:
    embed = _branded(user, guild, settings, settings.error_color)
    embed.title = title
    embed.description = description
    return embed


def success_embed(
    user: discord.abc.User,
    guild: discord.Guild | None,
    title: str,
    description: str,
    settings: Settings,
) -> discord.Embed:
    embed = _branded(user, guild, settings, settings.primary_color)
    embed.title = title
    embed.description = description
    return embed


def payment_embed(
    user: discord.abc.User,
    guild: discord.Guild | None,
    payment: PaymentRecord,
    product_image: str | None,
    settings: Settings,
) -> discord.Embed:
    """Summary of the verified purchase shown before the review form."""
    embed = _branded(user, guild, settings, settings.primary_color)
    embed.add_field(name="Product", value=payment.product.name, inline=True)
    embed.add_field(name="Price", value=f"{payment.currency} {payment.amount or '0.00'}", inline=True)
    embed.add_field(name="Date", value=_format_date(payment.date), inline=True)
    if product_image:
        embed.set_image(url=product_image)
    return embed


def review_embed(announcement: ReviewAnnouncement, settings: Settings) -> discord.Embed:
    """The public review posted to the display channel."""
    embed = discord.Embed(
        description=f"**Review:** {announcement.review_text}",
        color=settings.primary_color,
        timestamp=discord.utils.utcnow(),
    )
    embed.set_author(name=announcement.reviewer_name, icon_url=announcement.reviewer_avatar)
    embed.add_field(name="Product", value=announcement.product_name, inline=True)
    embed.add_field(
        name="Rating",
        value=f"{stars(announcement.rating, settings)} ({announcement.rating}/5)",
        inline=True,
    )
    embed.set_footer(text=settings.branding.footer)
    if announcement.reviewer_avatar:
        embed.set_thumbnail(url=announcement.reviewer_avatar)
    if announcement.product_image:
        embed.set_image(url=announcement.product_image)
    return embed
