"""Notifications repository using SQLAlchemy ORM.

Reads user preferences and writes/prunes notification history.

Usage:
    from eventintel.repositories.notifications_orm import (
        list_preferences, insert_notification,
        prune_notification_history, count_notifications,
    )
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, func, select

from eventintel.core.logging import get_logger
from eventintel.database.connection import get_session
from eventintel.database.orm import NotificationHistory, NotificationPreference
from eventintel.domain.notifications import NotificationRecord, UserNotificationPreference


logger = get_logger("repositories.notifications_orm")


def _preference_to_dict(row: NotificationPreference) -> dict[str, Any]:
    return {column.key: getattr(row, column.key) for column in NotificationPreference.__table__.columns}


async def list_preferences() -> list[UserNotificationPreference]:
    """Load every user's notification preferences."""
    async with get_session() as session:
        result = await session.execute(select(NotificationPreference))
        rows = result.scalars().all()
        return [UserNotificationPreference.from_row(_preference_to_dict(r)) for r in rows]


async def insert_notification(record: NotificationRecord) -> int:
    """Store one notification; returns its id."""
    async with get_session() as session:
        row = NotificationHistory(
            user_id=record.user_id,
            type=record.type,
            title=record.title,
            message=record.message,
            icon=record.icon,
            action_url=record.action_url,
            related_id=record.related_id,
            related_type=record.related_type,
            extra_metadata=record.metadata,
        )
        if record.created_at is not None:
            row.created_at = record.created_at
        session.add(row)
        await session.commit()
        await session.refresh(row)
        return row.id


async def prune_notification_history(user_id: str, keep: int) -> int:
    """Delete all but the ``keep`` newest notifications of one user.

    Returns:
        Number of rows deleted
    """
    async with get_session() as session:
        keep_ids = (
            await session.execute(
                select(NotificationHistory.id)
                .where(NotificationHistory.user_id == user_id)
                .order_by(NotificationHistory.created_at.desc(), NotificationHistory.id.desc())
                .limit(keep)
            )
        ).scalars().all()

        if len(keep_ids) < keep:
            return 0

        result = await session.execute(
            delete(NotificationHistory).where(
                NotificationHistory.user_id == user_id,
                NotificationHistory.id.not_in(keep_ids),
            )
        )
        await session.commit()
        deleted = result.rowcount or 0
        if deleted:
            logger.debug(f"Pruned {deleted} notifications", extra={"user_id": user_id})
        return deleted


async def count_notifications(user_id: str) -> int:
    """Number of notifications stored for one user."""
    async with get_session() as session:
        result = await session.execute(
            select(func.count()).select_from(NotificationHistory).where(
                NotificationHistory.user_id == user_id
            )
        )
        return result.scalar_one()


class SqlNotificationStore:
    """NotificationStore backed by this repository."""

    async def list_preferences(self) -> list[UserNotificationPreference]:
        return await list_preferences()

    async def insert_notification(self, record: NotificationRecord) -> None:
        await insert_notification(record)

    async def prune_notification_history(self, user_id: str, keep: int) -> int:
        return await prune_notification_history(user_id, keep)

    async def count_notifications(self, user_id: str) -> int:
        return await count_notifications(user_id)
