from types import SimpleNamespace

import pytest
from bot.config import Settings


@pytest.fixture()
def settings():
    return Settings.model_validate(
        {
            "colors": {"primary": "#5865F2", "error": "#ED4245"},
            "emojis": {"star": "⭐"},
            "channels": {"review_display": 555},
            "branding": {"footer": "Example Store"},
        }
    )


@pytest.fixture()
def user():
    return SimpleNamespace(id=1001, name="alice", display_avatar=SimpleNamespace(url="https://cdn.example.com/alice.png"))


@pytest.fixture()
def guild():
    return SimpleNamespace(id=1, icon=SimpleNamespace(url="https://cdn.example.com/guild.png"))
