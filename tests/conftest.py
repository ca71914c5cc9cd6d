"""
Pytest configuration and shared fixtures.
"""

import pytest

from stream_avatar import config, security, sessions
from stream_avatar.models import HeadVisual, Voice
from stream_avatar.platform_client import PlatformClient


@pytest.fixture(autouse=True)
def reset_settings():
    """Reset settings to defaults before each test."""
    original_api_key = config.settings.STREAM_AVATAR_API_KEY
    original_base = config.settings.UNITH_API_BASE_URL
    original_stream = config.settings.UNITH_STREAM_BASE_URL

    # Disable API key requirement and point at a fake platform
    config.settings.STREAM_AVATAR_API_KEY = None
    config.settings.UNITH_API_BASE_URL = "https://platform.test"
    config.settings.UNITH_STREAM_BASE_URL = "https://stream.test"

    yield

    config.settings.STREAM_AVATAR_API_KEY = original_api_key
    config.settings.UNITH_API_BASE_URL = original_base
    config.settings.UNITH_STREAM_BASE_URL = original_stream


@pytest.fixture(autouse=True)
def fresh_store(monkeypatch):
    """Each test gets an empty session store and a full rate-limit bucket."""
    store = sessions.SessionStore()
    monkeypatch.setattr(sessions, "_store", store)
    monkeypatch.setattr(
        security,
        "bucket",
        security.TokenBucket(config.settings.RATE_LIMIT_RPS, config.settings.RATE_LIMIT_BURST),
    )
    return store


def make_visuals(n: int) -> list[HeadVisual]:
    return [
        HeadVisual(
            id=f"v{i}",
            name=f"Visual {i}",
            gender="FEMALE" if i % 2 else "MALE",
            avatar=f"https://cdn.test/v{i}.png",
        )
        for i in range(1, n + 1)
    ]


def make_voices() -> list[Voice]:
    return [
        Voice(voice_id="voice-a", display_name="Rachel", locale="en-US"),
        Voice(voice_id="voice-b", display_name="Adam"),
    ]


@pytest.fixture
def fake_platform(monkeypatch):
    """
    Replace PlatformClient network methods with in-memory fakes.

    Returns a dict recording the calls made and the token each call carried.
    """
    calls: dict = {
        "tokens": [],
        "create_body": None,
        "splitter": None,
        "public_url": "https://app.test/org-1/head-1?api_key=secret123",
        "visuals": make_visuals(25),
        "voices": make_voices(),
        "gender": "unset",
    }

    async def get_token(self, email, secret_key):
        if secret_key != "sk_good":
            from stream_avatar.errors import PlatformHTTPError
            raise PlatformHTTPError(401, "invalid credentials")
        self.token = "tok-123"
        return "tok-123"

    async def list_head_visuals(self, gender=None):
        calls["tokens"].append(self.token)
        calls["gender"] = gender
        return list(calls["visuals"])

    async def list_voices(self):
        calls["tokens"].append(self.token)
        return list(calls["voices"])

    async def create_head(self, req):
        calls["create_body"] = req.to_payload()
        return {"id": "head-1", "alias": req.alias}

    async def disable_splitter(self, head_id):
        calls["splitter"] = head_id
        return {}

    async def get_head(self, head_id):
        return {"id": head_id, "publicUrl": calls["public_url"]}

    monkeypatch.setattr(PlatformClient, "get_token", get_token)
    monkeypatch.setattr(PlatformClient, "list_head_visuals", list_head_visuals)
    monkeypatch.setattr(PlatformClient, "list_voices", list_voices)
    monkeypatch.setattr(PlatformClient, "create_head", create_head)
    monkeypatch.setattr(PlatformClient, "disable_splitter", disable_splitter)
    monkeypatch.setattr(PlatformClient, "get_head", get_head)
    return calls
