"""Pytest configuration and fixtures."""

from __future__ import annotations

import itertools
from collections import defaultdict
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

import pytest

from eventintel.domain.notifications import NotificationRecord, UserNotificationPreference
from eventintel.services.notifications.message_builder import DeliveryPayload

# Configure asyncio
pytest_plugins = ["pytest_asyncio"]


FIXED_NOW = datetime(2025, 1, 10, 14, 0, tzinfo=UTC)


class FakeNotificationStore:
    """In-memory NotificationStore with monotonically increasing timestamps."""

    def __init__(self, preferences: Sequence[UserNotificationPreference] = ()):
        self.preferences = list(preferences)
        self.rows: dict[str, list[NotificationRecord]] = defaultdict(list)
        self.pruned_users: list[str] = []
        self.fail_insert_for: set[str] = set()
        self._clock = itertools.count()

    async def list_preferences(self) -> list[UserNotificationPreference]:
        return list(self.preferences)

    async def insert_notification(self, record: NotificationRecord) -> None:
        if record.user_id in self.fail_insert_for:
            raise RuntimeError("insert failed")
        if record.created_at is None:
            record = record.model_copy(
                update={"created_at": FIXED_NOW + timedelta(seconds=next(self._clock))}
            )
        self.rows[record.user_id].append(record)

    async def prune_notification_history(self, user_id: str, keep: int) -> int:
        self.pruned_users.append(user_id)
        rows = sorted(self.rows[user_id], key=lambda r: r.created_at, reverse=True)
        deleted = max(len(rows) - keep, 0)
        self.rows[user_id] = rows[:keep]
        return deleted

    async def count_notifications(self, user_id: str) -> int:
        return len(self.rows[user_id])


class RecordingTransport:
    """DeliveryTransport that records what it was asked to send."""

    def __init__(self, fail: bool = False):
        self.calls: list[tuple[list[str], DeliveryPayload]] = []
        self.fail = fail

    async def send(self, user_ids: Sequence[str], payload: DeliveryPayload) -> int | None:
        if self.fail:
            raise RuntimeError("transport down")
        self.calls.append((list(user_ids), payload))
        return None


def make_prefs(user_id: str = "user-1", **overrides) -> UserNotificationPreference:
    """Enabled preference record with every news/signal toggle on."""
    data = {
        "user_id": user_id,
        "notifications_enabled": True,
        "news_low_impact": True,
    }
    data.update(overrides)
    return UserNotificationPreference(**data)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def store() -> FakeNotificationStore:
    return FakeNotificationStore()


@pytest.fixture(name="make_prefs")
def make_prefs_fixture():
    return make_prefs


@pytest.fixture
def push_transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def email_transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def failing_transport() -> RecordingTransport:
    return RecordingTransport(fail=True)
