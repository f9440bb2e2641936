"""Bot settings.

Presentation settings (colours, emoji, announcement channel, footer) live in
`config.json`. Secrets come from the environment, which the runner fills
from `.env`.
"""

import json
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

DEFAULT_CONFIG_PATH = "config.json"

_HEX_COLOR = re.compile(r"#?[0-9a-fA-F]{6}")


class ConfigurationError(Exception):
    """Raised at startup when settings or secrets are missing or malformed."""


class Colors(BaseModel):
    primary: str = "#5865F2"
    error: str = "#ED4245"

    @field_validator("primary", "error")
    @classmethod
    def _must_be_hex(cls, value: str) -> str:
        if not _HEX_COLOR.fullmatch(value):
            raise ValueError(f"'{value}' is not a hex colour")
        return value


class Emojis(BaseModel):
    star: str = "⭐"


class Channels(BaseModel):
    review_display: int | None = None


class Branding(BaseModel):
    footer: str | None = None


class Settings(BaseModel):
    colors: Colors = Field(default_factory=Colors)
    emojis: Emojis = Field(default_factory=Emojis)
    channels: Channels = Field(default_factory=Channels)
    branding: Branding = Field(default_factory=Branding)

    @property
    def primary_color(self) -> int:
        return int(self.colors.primary.lstrip("#"), 16)

    @property
    def error_color(self) -> int:
        return int(self.colors.error.lstrip("#"), 16)


def load_settings(path: str | Path = DEFAULT_CONFIG_PATH) -> Settings:
    """Read and validate the JSON settings file."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Settings file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Settings file {path} is not valid JSON: {exc}") from exc

    try:
        return Settings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid settings in {path}: {exc}") from exc


@dataclass(frozen=True)
class Credentials:
    discord_token: str
    tebex_secret_key: str
    guild_id: int | None = None
    tebex_webstore_id: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Credentials":
        environ = os.environ if environ is None else environ

        missing = [name for name in ("DISCORD_BOT_TOKEN", "TEBEX_SECRET_KEY") if not environ.get(name)]
        if missing:
            raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

        guild_id = environ.get("GUILD_ID") or None
        if guild_id is not None:
            try:
                guild_id = int(guild_id)
            except ValueError as exc:
                raise ConfigurationError(f"GUILD_ID must be numeric, got '{guild_id}'") from exc

        return cls(
            discord_token=environ["DISCORD_BOT_TOKEN"],
            tebex_secret_key=environ["TEBEX_SECRET_KEY"],
            guild_id=guild_id,
            tebex_webstore_id=environ.get("TEBEX_WEBSTORE_ID") or None,
        )
