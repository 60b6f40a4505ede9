# core/live_list.py

import logging
import threading
import weakref
from concurrent.futures import Future
from typing import Callable, Generic, List, Optional, Set, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")

Submit = Callable[..., Future]


class LiveList(Generic[T]):
    """
    A query whose full result is pushed to every subscriber again each time
    the table it reads from changes.

    Evaluation and delivery happen on the database worker thread. Widgets
    should go through core.signals.LiveListSignal rather than subscribing
    directly. A list with subscribers stays alive until it is closed or the
    last one unsubscribes.
    """

    def __init__(self, query: Callable[[], List[T]], submit: Submit,
                 tracker: Optional["InvalidationTracker"] = None):
        self._query = query
        self._submit = submit
        self._tracker = tracker
        self._subscribers: List[Callable[[List[T]], None]] = []
        self._lock = threading.Lock()
        self._snapshot: Optional[List[T]] = None
        self.closed = False
        if tracker is not None:
            tracker.register(self)

    # ── Public ───────────────────────────────────────────────

    def subscribe(self, callback: Callable[[List[T]], None]) -> Callable[[], None]:
        """
        Register `callback` and send it the current result right away.
        Returns a function that unsubscribes it.

        `callback` runs on the database worker. It must not block on another
        database Future (e.g. dao.get_by_id(...).result()): that call waits
        for the worker it is running on and never returns.
        """
        with self._lock:
            self._subscribers.append(callback)
        if self._tracker is not None:
            self._tracker.retain(self)
        self._submit(self._deliver_first, callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Callable[[List[T]], None]) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)
            idle = not self._subscribers
        if idle and self._tracker is not None:
            self._tracker.release(self)

    def current(self) -> "Future[List[T]]":
        """One-shot evaluation, like reading the first value of the stream."""
        return self._submit(self._evaluate)

    @property
    def snapshot(self) -> Optional[List[T]]:
        """Last result evaluated, None before the first one."""
        return self._snapshot

    def close(self) -> None:
        with self._lock:
            self._subscribers.clear()
            self.closed = True
        if self._tracker is not None:
            self._tracker.release(self)

    # ── Worker thread ────────────────────────────────────────

    def refresh(self) -> None:
        """Re-run the query and push the result to every subscriber."""
        with self._lock:
            if self.closed or not self._subscribers:
                return
        result = self._evaluate()
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            self._push(callback, result)

    def _deliver_first(self, callback: Callable[[List[T]], None]) -> None:
        with self._lock:
            if callback not in self._subscribers:
                return
        self._push(callback, self._evaluate())

    def _evaluate(self) -> List[T]:
        result = self._query()
        self._snapshot = result
        return result

    @staticmethod
    def _push(callback: Callable[[List[T]], None], result: List[T]) -> None:
        try:
            callback(list(result))
        except Exception:
            log.exception("Live list subscriber %r failed", callback)


class InvalidationTracker:
    """
    Re-evaluates every subscribed LiveList after a write.

    Invalidations that arrive while a refresh is already queued share that
    refresh. Because the refresh is queued behind the write on the same
    worker, subscribers never see a result older than a finished write.
    """

    def __init__(self, submit: Submit):
        self._submit = submit
        self._lists: "weakref.WeakSet[LiveList]" = weakref.WeakSet()
        self._active: Set[LiveList] = set()
        self._lock = threading.Lock()
        self._pending = False

    def register(self, live: LiveList) -> None:
        with self._lock:
            self._lists.add(live)

    def retain(self, live: LiveList) -> None:
        """Hold `live` strongly while it has subscribers."""
        with self._lock:
            self._active.add(live)

    def release(self, live: LiveList) -> None:
        with self._lock:
            self._active.discard(live)

    def invalidate(self) -> None:
        with self._lock:
            if self._pending:
                return
            self._pending = True
        self._submit(self._refresh)

    def _refresh(self) -> None:
        with self._lock:
            self._pending = False
            lists = [live for live in self._lists if not live.closed]
        for live in lists:
            live.refresh()
