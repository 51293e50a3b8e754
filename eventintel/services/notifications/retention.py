"""Bounded notification history per user.

Insert and prune for the same user are serialized through a per-user lock
so a prune never races an insert arriving from a concurrent batch.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager

from eventintel.core.config import settings
from eventintel.core.logging import get_logger
from eventintel.services.notifications.store import NotificationStore


logger = get_logger("notifications.retention")


class KeyedLock:
    """
    One asyncio.Lock per key, dropped again once nobody holds or awaits it.

    Usage:
        locks = KeyedLock()

        async with locks.hold(user_id):
            await store.insert_notification(record)
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if self._users[key] == 0:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


# Shared by every batch running in this process
user_locks = KeyedLock()


async def cleanup_old_notifications(
    store: NotificationStore,
    user_ids: Iterable[str],
    keep: int | None = None,
    *,
    locks: KeyedLock | None = None,
    workers: int | None = None,
) -> dict[str, int]:
    """Keep only the newest ``keep`` notifications for each given user.

    Only the listed users are touched; an empty list is a no-op.

    Args:
        store: Record store
        user_ids: Users just notified
        keep: Rows kept per user (defaults to settings)
        locks: Per-user lock registry (defaults to the process-wide one)
        workers: Concurrent users (defaults to settings)

    Returns:
        Dict with users processed, rows deleted and failures
    """
    keep = settings.notification_history_limit if keep is None else keep
    locks = locks if locks is not None else user_locks
    semaphore = asyncio.Semaphore(workers or settings.notification_workers)
    unique_ids = list(dict.fromkeys(user_ids))
    stats = {"users": len(unique_ids), "deleted": 0, "failed": 0}

    if not unique_ids:
        return stats

    async def _prune(user_id: str) -> None:
        async with semaphore, locks.hold(user_id):
            try:
                stats["deleted"] += await store.prune_notification_history(user_id, keep)
            except Exception as e:
                stats["failed"] += 1
                logger.error(
                    f"Failed to prune notification history: {e}",
                    extra={"user_id": user_id},
                )

    await asyncio.gather(*(_prune(uid) for uid in unique_ids))

    if stats["deleted"]:
        logger.debug("Pruned notification history", extra=dict(stats))
    return stats
