from __future__ import annotations

from datetime import timedelta

import pytest

from study_quiz.core.errors import MalformedSubmissionError, UnauthorizedError
from study_quiz.core.models import QuizResult
from study_quiz.core.services.session_store import (
    SessionCorrelationStore,
    format_token,
    parse_token,
)

RESULT = QuizResult(answers=(("Q", "4"),), score=1.0)


def test_issue_then_redeem_returns_result_once(clock) -> None:
    store = SessionCorrelationStore(clock=clock)
    token = store.issue(RESULT)

    assert store.redeem(token) is RESULT
    with pytest.raises(UnauthorizedError):
        store.redeem(token)


def test_unknown_token_is_unauthorized(clock) -> None:
    store = SessionCorrelationStore(clock=clock)

    with pytest.raises(UnauthorizedError):
        store.redeem(12345)


def test_expired_token_is_unauthorized_and_removed(clock) -> None:
    store = SessionCorrelationStore(clock=clock)
    token = store.issue(RESULT)
    clock.advance(timedelta(minutes=5).total_seconds() + 1)

    with pytest.raises(UnauthorizedError):
        store.redeem(token)
    assert token not in store
    assert len(store) == 0


def test_token_is_redeemable_up_to_the_ttl(clock) -> None:
    store = SessionCorrelationStore(ttl=timedelta(seconds=10), clock=clock)
    token = store.issue(RESULT)
    clock.advance(10)

    assert store.redeem(token) is RESULT


def test_sweep_drops_only_expired_entries(clock) -> None:
    store = SessionCorrelationStore(ttl=timedelta(seconds=60), clock=clock)
    old = store.issue(RESULT)
    clock.advance(45)
    fresh = store.issue(RESULT)
    clock.advance(30)

    assert store.sweep_expired() == 1
    assert old not in store
    assert fresh in store
    assert store.redeem(fresh) is RESULT


def test_tokens_are_distinct_128_bit_values(clock) -> None:
    store = SessionCorrelationStore(clock=clock)
    tokens = {store.issue(RESULT) for _ in range(50)}

    assert len(tokens) == 50
    assert all(0 <= token < 2**128 for token in tokens)


def test_token_hex_round_trip() -> None:
    token = 0x1F2E3D4C5B6A79880123456789ABCDEF

    assert format_token(token) == "1F2E3D4C5B6A79880123456789ABCDEF"
    assert parse_token("1f2e3d4c5b6a79880123456789abcdef") == token


@pytest.mark.parametrize("state", ["", "xyz", "0x1F", "1" * 33, " 1F", "-1"])
def test_malformed_state_is_rejected(state: str) -> None:
    with pytest.raises(MalformedSubmissionError):
        parse_token(state)
