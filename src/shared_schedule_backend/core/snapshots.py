'''
In-process change notifications for schedule snapshots.

The storage side publishes the complete, current record set of an owner
after every committed change; subscribers always receive a freshly built
ScheduleSnapshot that replaces whatever they had before.
'''
import threading
from collections import OrderedDict
from typing import Any, Callable, Iterable, Optional

from ..common.logger import log
from .aggregator import ScheduleSnapshot, build_snapshot

SnapshotCallback = Callable[[str, ScheduleSnapshot], None]

DEFAULT_MAX_RETAINED = 1024


class SnapshotHub:
    """
    Subscription registry keyed by owner id.
    Safe to use from several threads; callbacks run outside the lock.

    The latest snapshot is kept for every owner with a subscriber. Owners
    without one keep theirs only until `max_retained` snapshots are held,
    after which the least recently published are dropped.
    """
    def __init__(self, max_retained: int = DEFAULT_MAX_RETAINED):
        self._lock = threading.Lock()
        self._subscribers: dict[str, list[SnapshotCallback]] = {}
        self._latest: OrderedDict[str, ScheduleSnapshot] = OrderedDict()
        self.max_retained = max_retained

    def subscribe(self, owner_id: Any, callback: SnapshotCallback) -> Callable[[], None]:
        """
        Registers `callback` for an owner and returns an unsubscribe function.
        If a snapshot was already published it is delivered immediately.
        """
        key = str(owner_id)
        with self._lock:
            self._subscribers.setdefault(key, []).append(callback)
            current = self._latest.get(key)

        if current is not None:
            self._deliver(key, callback, current)

        def unsubscribe():
            with self._lock:
                callbacks = self._subscribers.get(key)
                if callbacks is None or callback not in callbacks:
                    return
                callbacks.remove(callback)
                if not callbacks:
                    del self._subscribers[key]
                    self._latest.pop(key, None)

        return unsubscribe

    def publish(self, owner_id: Any, records: Iterable[Any]) -> ScheduleSnapshot:
        """Builds a snapshot from the full record set and replaces the previous one."""
        snapshot = build_snapshot(records)
        self.replace(owner_id, snapshot)
        return snapshot

    def replace(self, owner_id: Any, snapshot: ScheduleSnapshot):
        """Stores an already built snapshot and delivers it to the owner's subscribers."""
        key = str(owner_id)
        with self._lock:
            self._latest[key] = snapshot
            self._latest.move_to_end(key)
            self._evict_unwatched()
            callbacks = list(self._subscribers.get(key, []))

        log.info(f"Publishing schedule snapshot for owner {key}: {snapshot!r} to {len(callbacks)} subscriber(s).")
        for callback in callbacks:
            self._deliver(key, callback, snapshot)

    def latest(self, owner_id: Any) -> Optional[ScheduleSnapshot]:
        with self._lock:
            return self._latest.get(str(owner_id))

    def subscriber_count(self, owner_id: Any) -> int:
        with self._lock:
            return len(self._subscribers.get(str(owner_id), []))

    def retained_owners(self) -> list[str]:
        with self._lock:
            return list(self._latest)

    def _evict_unwatched(self):
        # Caller holds the lock.
        overflow = len(self._latest) - self.max_retained
        if overflow <= 0:
            return
        for key in [k for k in self._latest if k not in self._subscribers][:overflow]:
            del self._latest[key]

    @staticmethod
    def _deliver(owner_id: str, callback: SnapshotCallback, snapshot: ScheduleSnapshot):
        try:
            callback(owner_id, snapshot)
        except Exception as e:
            log.error(f"Snapshot subscriber failed for owner {owner_id}: {e}", exc_info=True)


# Process-wide hub used by the services.
snapshot_hub = SnapshotHub()
