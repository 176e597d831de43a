# meeting_governance/services/locks.py
from __future__ import annotations

import asyncio
import weakref
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache


class MeetingLockRegistry:
    """
    One asyncio.Lock per (tenant_id, meeting_id).

    Every mutation touching a meeting or anything hanging off it (notices,
    executive sessions, recusals, attendance, actions, votes, minutes) runs
    its load-validate-mutate-commit sequence while holding this lock, so two
    writers on one meeting never interleave. Locks are weakly referenced and
    disappear once no coroutine holds or waits on them.

    Locks are not re-entrant: a service method holding a meeting lock must
    not call another locking service method for the same meeting.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[tuple[str, str], asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def lock_for(self, tenant_id: str, meeting_id: str) -> asyncio.Lock:
        key = (tenant_id, meeting_id)
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    @asynccontextmanager
    async def hold(self, tenant_id: str, meeting_id: str) -> AsyncIterator[None]:
        lock = self.lock_for(tenant_id, meeting_id)
        async with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)


@lru_cache()
def get_lock_registry() -> MeetingLockRegistry:
    """
    Process-wide registry shared by every request.
    """
    return MeetingLockRegistry()
