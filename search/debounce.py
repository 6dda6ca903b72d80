"""
Query Debouncer

Turns the rapidly changing raw query of a search box into a stable
"committed query" that is worth running a search for.

States:
- IDLE: nothing scheduled
- PENDING: a commit is scheduled for when the quiet interval elapses

Every update cancels the scheduled commit before doing anything else, so
at most one timer is pending and a superseded commit can never fire.
Blank queries commit immediately.

Timers come from a scheduler exposing call_later(delay, callback) and
returning a handle with cancel(). The default is picked when the debouncer
is built: the running asyncio loop when there is one, otherwise
threading.Timer threads. Tests plug in a virtual clock.

Usage:
    debouncer = QueryDebouncer(interval=0.5, on_commit=run_search)
    debouncer.update("li")
    debouncer.update("libre")   # "li" will never be committed
"""

import asyncio
import logging
import threading
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 0.5


class DebounceState(Enum):
    IDLE = "idle"
    PENDING = "pending"


class AsyncioScheduler:
    """Schedules callbacks on an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callable[[], Any]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)


class ThreadingScheduler:
    """
    Schedules callbacks on daemon threading.Timer threads.

    Used from plain synchronous code; callbacks run on the timer thread.
    """

    def call_later(self, delay: float, callback: Callable[[], Any]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


def default_scheduler():
    """Scheduler for the current context: the running event loop if any."""
    try:
        return AsyncioScheduler(asyncio.get_running_loop())
    except RuntimeError:
        logger.debug("No running event loop, debouncing on timer threads")
        return ThreadingScheduler()


class QueryDebouncer:
    """
    Two-state debounce machine for one search session.

    State changes are serialized by a lock so timer threads can fire while
    the owner keeps typing. on_commit is called outside the lock.
    """

    def __init__(
        self,
        interval: float = DEFAULT_INTERVAL,
        scheduler=None,
        on_commit: Optional[Callable[[str], Any]] = None
    ):
        """
        Args:
            interval: Quiet period in seconds before a query is committed
            scheduler: Object with call_later(delay, callback); see default_scheduler
            on_commit: Called with the committed query on every commit
        """
        if interval < 0:
            raise ValueError(f"interval must be >= 0, got {interval}")
        self.interval = interval
        self.scheduler = scheduler or default_scheduler()
        self.on_commit = on_commit

        self.raw_query = ''
        self.committed_query = ''
        self.state = DebounceState.IDLE
        self.commit_count = 0

        self._handle = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def is_searching(self) -> bool:
        """True while a commit is pending."""
        return self.state is DebounceState.PENDING

    def update(self, raw_query: str):
        """Register a new raw query value."""
        if not isinstance(raw_query, str):
            raw_query = ''

        with self._lock:
            self._drop_pending()
            self.raw_query = raw_query

            if raw_query.strip():
                generation = self._generation
                self._handle = self.scheduler.call_later(
                    self.interval, lambda: self._fire(generation)
                )
                self.state = DebounceState.PENDING
                return

            self._commit(raw_query)

        self._notify(raw_query)

    def cancel(self) -> bool:
        """
        Drop the pending commit, if any.

        Returns:
            True if a commit was pending
        """
        with self._lock:
            return self._drop_pending()

    def _drop_pending(self) -> bool:
        # Any callback scheduled before this point is now stale
        self._generation += 1

        if self._handle is None:
            return False

        self._handle.cancel()
        self._handle = None
        self.state = DebounceState.IDLE
        return True

    def _fire(self, generation: int):
        with self._lock:
            if generation != self._generation:
                logger.debug("Ignoring superseded debounce timer")
                return
            self._handle = None
            query = self.raw_query
            self._commit(query)

        self._notify(query)

    def _commit(self, query: str):
        self.state = DebounceState.IDLE
        self.committed_query = query
        self.commit_count += 1

        logger.debug(
            f"Committed query '{query[:50]}'",
            extra={'commit_count': self.commit_count}
        )

    def _notify(self, query: str):
        if self.on_commit is not None:
            self.on_commit(query)
