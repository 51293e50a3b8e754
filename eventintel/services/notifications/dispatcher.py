"""Batch dispatch of news and signal notifications.

Reads every preference record once, filters eligible users, stores one
history row per user with a bounded worker pool, fans out to push/email,
then prunes history for exactly the users just notified.

Usage:
    from eventintel.services.notifications import create_news_notifications

    stats = await create_news_notifications(news_item)
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Any

from eventintel.core.config import settings
from eventintel.core.logging import batch_context, batch_id_var, get_logger
from eventintel.domain.notifications import NewsItem, SignalEvent, UserNotificationPreference
from eventintel.services.notifications.eligibility import should_notify_news, should_notify_signal
from eventintel.services.notifications.message_builder import (
    RenderedNotification,
    build_news_notification,
    build_signal_notification,
)
from eventintel.services.notifications.retention import (
    KeyedLock,
    cleanup_old_notifications,
    user_locks,
)
from eventintel.services.notifications.store import DeliveryTransport, NotificationStore


logger = get_logger("notifications.dispatcher")


def _default_store() -> NotificationStore:
    from eventintel.repositories.notifications_orm import SqlNotificationStore

    return SqlNotificationStore()


async def _deliver(
    transport: DeliveryTransport | None,
    channel: str,
    user_ids: Sequence[str],
    rendered: RenderedNotification,
) -> int:
    if transport is None or not user_ids:
        return 0
    try:
        delivered = await transport.send(list(user_ids), rendered.to_payload())
    except Exception as e:
        logger.warning(
            f"{channel} delivery failed: {e}",
            extra={"channel": channel, "tag": rendered.tag, "recipients": len(user_ids)},
        )
        return 0
    return len(user_ids) if delivered is None else delivered


async def _dispatch(
    rendered: RenderedNotification,
    is_eligible: Callable[[UserNotificationPreference], bool],
    *,
    store: NotificationStore | None,
    push: DeliveryTransport | None,
    email: DeliveryTransport | None,
    keep: int | None,
    workers: int | None,
    locks: KeyedLock | None,
) -> dict[str, Any]:
    store = store if store is not None else _default_store()
    locks = locks if locks is not None else user_locks
    stats: dict[str, Any] = {
        "started_at": datetime.now(UTC).isoformat(),
        "batch_id": batch_id_var.get(),
        "type": rendered.type,
        "related_id": rendered.related_id,
        "preferences": 0,
        "eligible": 0,
        "inserted": 0,
        "failed": 0,
        "pushed": 0,
        "emailed": 0,
        "pruned": 0,
        "errors": [],
    }

    try:
        preferences = await store.list_preferences()
    except Exception as e:
        logger.error(f"Failed to load notification preferences: {e}")
        stats["errors"].append({"fatal": str(e)})
        stats["completed_at"] = datetime.now(UTC).isoformat()
        return stats

    stats["preferences"] = len(preferences)
    eligible = [p for p in preferences if is_eligible(p)]
    stats["eligible"] = len(eligible)

    if not eligible:
        logger.info("No eligible users", extra={"type": rendered.type, "related_id": rendered.related_id})
        stats["completed_at"] = datetime.now(UTC).isoformat()
        return stats

    semaphore = asyncio.Semaphore(workers or settings.notification_workers)

    async def _insert(prefs: UserNotificationPreference) -> UserNotificationPreference | None:
        async with semaphore, locks.hold(prefs.user_id):
            try:
                await store.insert_notification(rendered.to_record(prefs.user_id))
            except Exception as e:
                logger.error(
                    f"Notification insert failed: {e}",
                    extra={"user_id": prefs.user_id, "related_id": rendered.related_id},
                )
                stats["errors"].append({"user_id": prefs.user_id, "error": str(e)})
                return None
        return prefs

    results = await asyncio.gather(*(_insert(p) for p in eligible))
    notified = [p for p in results if p is not None]
    stats["inserted"] = len(notified)
    stats["failed"] = len(eligible) - len(notified)

    if not notified:
        logger.error("All notification inserts failed", extra={"related_id": rendered.related_id})
        stats["completed_at"] = datetime.now(UTC).isoformat()
        return stats

    stats["pushed"] = await _deliver(
        push, "push", [p.user_id for p in notified if p.push_notifications], rendered
    )
    stats["emailed"] = await _deliver(
        email, "email", [p.user_id for p in notified if p.email_notifications], rendered
    )

    cleanup = await cleanup_old_notifications(
        store, [p.user_id for p in notified], keep, locks=locks, workers=workers
    )
    stats["pruned"] = cleanup["deleted"]

    stats["completed_at"] = datetime.now(UTC).isoformat()
    logger.info(
        f"Created {stats['inserted']}/{stats['eligible']} {rendered.type} notifications",
        extra={
            "related_id": rendered.related_id,
            "inserted": stats["inserted"],
            "failed": stats["failed"],
            "pushed": stats["pushed"],
            "emailed": stats["emailed"],
            "pruned": stats["pruned"],
        },
    )
    return stats


async def create_news_notifications(
    news: NewsItem,
    *,
    store: NotificationStore | None = None,
    now: datetime | None = None,
    push: DeliveryTransport | None = None,
    email: DeliveryTransport | None = None,
    keep: int | None = None,
    workers: int | None = None,
    locks: KeyedLock | None = None,
) -> dict[str, Any]:
    """Notify every eligible user about a news item.

    Returns:
        Dict with statistics about the run
    """
    now = now or datetime.now(UTC)
    with batch_context():
        return await _dispatch(
            build_news_notification(news),
            lambda prefs: should_notify_news(prefs, news, now),
            store=store,
            push=push,
            email=email,
            keep=keep,
            workers=workers,
            locks=locks,
        )


async def create_signal_notifications(
    event: SignalEvent,
    *,
    store: NotificationStore | None = None,
    now: datetime | None = None,
    push: DeliveryTransport | None = None,
    email: DeliveryTransport | None = None,
    keep: int | None = None,
    workers: int | None = None,
    locks: KeyedLock | None = None,
) -> dict[str, Any]:
    """Notify every user subscribed to this signal type.

    Returns:
        Dict with statistics about the run
    """
    now = now or datetime.now(UTC)
    with batch_context():
        return await _dispatch(
            build_signal_notification(event),
            lambda prefs: should_notify_signal(prefs, event.signal, now),
            store=store,
            push=push,
            email=email,
            keep=keep,
            workers=workers,
            locks=locks,
        )
