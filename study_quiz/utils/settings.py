from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from study_quiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    questions_dir: Path = Field(default=Path("questions"), validation_alias="QUESTIONS_DIR")
    submissions_dir: Path = Field(default=Path("submissions"), validation_alias="SUBMISSIONS_DIR")

    host: str = Field(default=DEFAULT_HOST, validation_alias="QUIZ_HOST")
    port: int = Field(default=DEFAULT_PORT, validation_alias="QUIZ_PORT")
    log_level: str = Field(default="INFO", validation_alias="QUIZ_LOG_LEVEL")

    # Online submission needs all four; otherwise the quiz runs offline.
    discord_client_id: str | None = Field(default=None, validation_alias="DISCORD_CLIENT_ID")
    discord_secret: str | None = Field(default=None, validation_alias="DISCORD_SECRET")
    discord_redirect: str | None = Field(default=None, validation_alias="DISCORD_REDIRECT")
    discord_guild_id: str | None = Field(default=None, validation_alias="DISCORD_GUILD_ID")

    def missing_discord_settings(self) -> list[str]:
        values = {
            "DISCORD_CLIENT_ID": self.discord_client_id,
            "DISCORD_SECRET": self.discord_secret,
            "DISCORD_REDIRECT": self.discord_redirect,
            "DISCORD_GUILD_ID": self.discord_guild_id,
        }
        return [name for name, value in values.items() if not value]

    def discord_enabled(self) -> bool:
        return not self.missing_discord_settings()


@lru_cache
def get_settings() -> Settings:
    return Settings()
