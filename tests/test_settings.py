from __future__ import annotations

from pathlib import Path

from study_quiz.utils.settings import get_settings

DISCORD_ENV = {
    "DISCORD_CLIENT_ID": "client",
    "DISCORD_SECRET": "secret",
    "DISCORD_REDIRECT": "https://quiz.example/oauth-redirect",
    "DISCORD_GUILD_ID": "42",
}


def test_discord_requires_every_setting(monkeypatch) -> None:
    for name in DISCORD_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DISCORD_CLIENT_ID", "client")

    settings = get_settings()

    assert not settings.discord_enabled()
    assert settings.missing_discord_settings() == ["DISCORD_SECRET", "DISCORD_REDIRECT", "DISCORD_GUILD_ID"]


def test_environment_overrides_defaults(monkeypatch) -> None:
    for name, value in DISCORD_ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.setenv("QUESTIONS_DIR", "/srv/quiz/questions")
    monkeypatch.setenv("QUIZ_PORT", "9000")

    settings = get_settings()

    assert settings.discord_enabled()
    assert settings.questions_dir == Path("/srv/quiz/questions")
    assert settings.port == 9000
    assert settings.submissions_dir == Path("submissions")
