"""Tests for the revision window policy."""

from datetime import UTC, datetime, timedelta

from formal_photo_bot.services.timeout_policy import RevisionTimeoutPolicy


def test_deadline_is_delivery_plus_window() -> None:
    policy = RevisionTimeoutPolicy(timedelta(seconds=60))
    delivered_at = datetime(2024, 5, 1, 9, 0, tzinfo=UTC)

    assert policy.deadline_from(delivered_at) == delivered_at + timedelta(seconds=60)


def test_expiry_is_strictly_after_deadline() -> None:
    policy = RevisionTimeoutPolicy(timedelta(seconds=60))
    deadline = datetime(2024, 5, 1, 9, 1, tzinfo=UTC)

    assert not policy.is_expired(deadline, deadline - timedelta(seconds=1))
    assert not policy.is_expired(deadline, deadline)
    assert policy.is_expired(deadline, deadline + timedelta(milliseconds=1))


def test_missing_deadline_never_expires() -> None:
    policy = RevisionTimeoutPolicy(timedelta(seconds=60))

    assert not policy.is_expired(None, datetime(2099, 1, 1, tzinfo=UTC))
