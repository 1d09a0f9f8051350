"""Business logic shared by the HTTP routes.

Submitting a quiz and proving who submitted it are two unrelated requests:
the submission is graded and parked under a random token, the learner is
sent to the identity provider with that token as OAuth ``state``, and the
callback redeems the token before the result is persisted.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging

from study_quiz.core.answer_verifier import grade_submission
from study_quiz.core.errors import OfflineModeError
from study_quiz.core.models import QuizResult
from study_quiz.core.question_bank import QuestionBank
from study_quiz.core.services.identity_exchange import IdentityProvider, ResolvedIdentity
from study_quiz.core.services.session_store import (
    SessionCorrelationStore,
    format_token,
    parse_token,
)
from study_quiz.core.services.submission_persister import FinalizeOutcome, SubmissionPersister

logger = logging.getLogger(__name__)


class QuizService:
    """Facade over the bank, correlation store, identity provider and persister."""

    def __init__(
        self,
        bank: QuestionBank,
        store: SessionCorrelationStore,
        persister: SubmissionPersister,
        identity_provider: IdentityProvider | None = None,
    ) -> None:
        self._bank = bank
        self._store = store
        self._persister = persister
        self._identity_provider = identity_provider

    @property
    def bank(self) -> QuestionBank:
        return self._bank

    @property
    def store(self) -> SessionCorrelationStore:
        return self._store

    @property
    def persister(self) -> SubmissionPersister:
        return self._persister

    def is_online(self) -> bool:
        return self._identity_provider is not None

    def submit(
        self,
        sequence: Sequence[int],
        submitted: Sequence[str],
        correct: Sequence[bool],
    ) -> str:
        """Grade a batch, park it, and return the identity provider's login URL."""
        provider = self._require_provider()
        result = grade_submission(self._bank, sequence, submitted, correct)
        token = self._store.issue(result)
        return provider.authorize_url(format_token(token))

    def complete(self, state: str, code: str) -> tuple[ResolvedIdentity, FinalizeOutcome]:
        """Redeem ``state``, resolve who logged in, and persist their result."""
        provider = self._require_provider()
        result: QuizResult = self._store.redeem(parse_token(state))
        identity = provider.resolve(code)
        outcome = self._persister.finalize(identity.user_id, result)
        if outcome.ok:
            logger.info("Saved result %.3f for %s", result.score, identity.user_id)
        return identity, outcome

    def _require_provider(self) -> IdentityProvider:
        if self._identity_provider is None:
            raise OfflineModeError("Online submission is disabled.")
        return self._identity_provider
