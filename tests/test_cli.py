"""
Tests for the stream-avatar command line.
"""

from stream_avatar import cli
from stream_avatar.errors import PlatformHTTPError
from stream_avatar.platform_client import PlatformClient

CREDS = ["--email", "me@example.com", "--secret-key", "sk_good"]


def test_token(fake_platform, capsys):
    assert cli.main(CREDS + ["token"]) == 0
    assert capsys.readouterr().out.strip() == "tok-123"


def test_missing_credentials(fake_platform, capsys, monkeypatch):
    monkeypatch.delenv("UNITH_SECRET_KEY", raising=False)
    assert cli.main(["--email", "me@example.com", "token"]) == 1
    assert "Please enter email and secret key." in capsys.readouterr().err


def test_credentials_from_environment(fake_platform, capsys, monkeypatch):
    monkeypatch.setenv("UNITH_EMAIL", "env@example.com")
    monkeypatch.setenv("UNITH_SECRET_KEY", "sk_good")
    assert cli.main(["token"]) == 0


def test_visuals_page(fake_platform, capsys):
    assert cli.main(CREDS + ["visuals", "--gender", "FEMALE", "--page", "3"]) == 0

    out = capsys.readouterr().out
    assert "v21" in out and "v20" not in out
    assert "Page 3 of 3 · 25 total" in out
    assert fake_platform["gender"] == "FEMALE"


def test_voices(fake_platform, capsys):
    assert cli.main(CREDS + ["voices"]) == 0
    out = capsys.readouterr().out
    assert "voice-a" in out
    assert "Rachel (en-US)" in out


def test_create_uses_first_voice(fake_platform, capsys):
    code = cli.main(CREDS + ["create", "--alias", "Helper", "--visual-id", "v2"])

    assert code == 0
    out = capsys.readouterr().out
    assert "Head ID: head-1" in out
    assert "Stream URL: https://stream.test/org-1/head-1?api_key=secret123" in out
    assert fake_platform["create_body"]["ttsVoice"] == "voice-a"


def test_platform_failure_exit_code(fake_platform, capsys, monkeypatch):
    async def failing(self, req):
        raise PlatformHTTPError(500, "server error")

    monkeypatch.setattr(PlatformClient, "create_head", failing)

    code = cli.main(CREDS + ["create", "--alias", "Helper", "--visual-id", "v2"])
    assert code == 1
    assert "HTTP 500 - server error" in capsys.readouterr().err


def test_create_with_visual_outside_gallery(fake_platform, capsys):
    code = cli.main(CREDS + ["create", "--alias", "Helper", "--visual-id", "v999"])

    assert code == 0
    assert fake_platform["create_body"]["headVisualId"] == "v999"
    assert "Head ID: head-1" in capsys.readouterr().out


def test_visuals_not_reloaded_when_voices_fail(fake_platform, capsys, monkeypatch):
    async def no_voices(self):
        raise PlatformHTTPError(503, "voices down")

    monkeypatch.setattr(PlatformClient, "list_voices", no_voices)

    assert cli.main(CREDS + ["visuals"]) == 0
    assert fake_platform["tokens"] == ["tok-123"]
    assert "Page 1 of 3 · 25 total" in capsys.readouterr().out


def test_gallery_failure_is_reported(fake_platform, capsys, monkeypatch):
    async def broken(self, gender=None):
        raise PlatformHTTPError(500, "gallery down")

    monkeypatch.setattr(PlatformClient, "list_head_visuals", broken)

    assert cli.main(CREDS + ["visuals"]) == 1
    captured = capsys.readouterr()
    assert "Error: HTTP 500 - gallery down" in captured.err
    assert "total" not in captured.out
