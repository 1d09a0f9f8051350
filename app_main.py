"""Application entry point for the study quiz service."""

from __future__ import annotations

import sys

from study_quiz.core.errors import QuestionBankError, QuestionParseError
from study_quiz.core.question_bank import load_question_bank
from study_quiz.core.quiz_service import QuizService
from study_quiz.core.services.identity_exchange import DiscordIdentityProvider, IdentityProvider
from study_quiz.core.services.leaderboard import Leaderboard
from study_quiz.core.services.session_store import SessionCorrelationStore
from study_quiz.core.services.submission_persister import RecordArchive, SubmissionPersister
from study_quiz.server.api_server import start_api_server
from study_quiz.utils.logging_config import configure_logging
from study_quiz.utils.settings import Settings, get_settings


def _parse_bind_address(argument: str) -> tuple[str, int]:
    """Accept an optional ``host:port`` override of the configured address."""
    host, separator, port = argument.rpartition(":")
    if not separator or not host or not port.isdigit():
        raise SystemExit(f"Invalid bind address {argument!r}; expected host:port")
    return host, int(port)


def _build_identity_provider(settings: Settings) -> IdentityProvider | None:
    if not settings.discord_enabled():
        return None
    return DiscordIdentityProvider(
        client_id=settings.discord_client_id,
        secret=settings.discord_secret,
        redirect_uri=settings.discord_redirect,
        guild_id=settings.discord_guild_id,
    )


def main() -> None:
    """Build the question bank and serve the quiz until interrupted."""
    settings = get_settings()
    logger = configure_logging(settings.log_level)
    logger.info("Starting study quiz service")

    try:
        bank = load_question_bank(settings.questions_dir)
    except (QuestionParseError, QuestionBankError) as exc:
        logger.critical("Unable to build the question bank: %s", exc)
        sys.exit(1)

    identity_provider = _build_identity_provider(settings)
    if identity_provider is None:
        logger.warning(
            "Discord support disabled! Missing settings: %s",
            ", ".join(settings.missing_discord_settings()),
        )

    quiz_service = QuizService(
        bank=bank,
        store=SessionCorrelationStore(),
        persister=SubmissionPersister(Leaderboard(), RecordArchive(settings.submissions_dir)),
        identity_provider=identity_provider,
    )

    host, port = settings.host, settings.port
    if len(sys.argv) > 1:
        host, port = _parse_bind_address(sys.argv[1])
    logger.info("Serving at %s:%d", host, port)
    start_api_server(quiz_service=quiz_service, host=host, port=port).join()


if __name__ == "__main__":
    main()
