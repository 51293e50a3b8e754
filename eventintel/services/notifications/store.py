"""Record store interface used by the notification engine."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from eventintel.domain.notifications import NotificationRecord, UserNotificationPreference
from eventintel.services.notifications.message_builder import DeliveryPayload


class NotificationStore(Protocol):
    """Preferences in, notification history out."""

    async def list_preferences(self) -> list[UserNotificationPreference]: ...

    async def insert_notification(self, record: NotificationRecord) -> None: ...

    async def prune_notification_history(self, user_id: str, keep: int) -> int:
        """Delete all but the ``keep`` newest rows of one user; return deleted count."""
        ...

    async def count_notifications(self, user_id: str) -> int: ...


class DeliveryTransport(Protocol):
    """Push or email fan-out. Returns the delivered count when known."""

    async def send(self, user_ids: Sequence[str], payload: DeliveryPayload) -> int | None: ...
