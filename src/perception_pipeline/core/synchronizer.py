"""
Approximate-time stream synchronizer.

Joins independently published streams (image, depth, calibration) into one
tuple per cluster of messages whose stamps lie within a tolerance window.
Emission is driven purely by arrivals, so callers must not expect a fixed
cadence: a jittery stream delays every tuple.
"""

import itertools
import logging
import threading
from collections.abc import Callable, Sequence
from typing import Any

from ..utils.constants import DEFAULT_SYNC_QUEUE_SIZE, DEFAULT_SYNC_TOLERANCE

logger = logging.getLogger(__name__)


def _default_stamp(message: Any) -> float:
    return float(message.stamp)


class ApproximateTimeSynchronizer:
    """
    Bounded-window correlator over N named streams.

    Each stream keeps at most queue_size pending messages keyed by stamp.
    When a message arrives, the other streams are searched for stamps within
    tolerance of it; the closest combination whose overall spread is below
    tolerance is emitted once, in stream order, and removed. Messages older
    than a matched one can no longer match and are dropped with it.

    Example:
        sync = ApproximateTimeSynchronizer(
            ["image", "depth", "camera_info"], on_tuple, queue_size=10, tolerance=0.05
        )
        sync.add("image", image_msg)
        sync.add("depth", depth_msg)
        sync.add("camera_info", info_msg)  # -> on_tuple(image_msg, depth_msg, info_msg)
    """

    def __init__(
        self,
        stream_names: Sequence[str],
        callback: Callable[..., Any],
        queue_size: int = DEFAULT_SYNC_QUEUE_SIZE,
        tolerance: float = DEFAULT_SYNC_TOLERANCE,
        stamp_of: Callable[[Any], float] = _default_stamp,
    ):
        """
        Create synchronizer.

        Args:
            stream_names: Names of the joined streams, in callback argument order
            callback: Called with one message per stream for every match
            queue_size: Maximum pending messages per stream
            tolerance: Maximum spread in seconds between stamps of one tuple
            stamp_of: Extracts the stamp (seconds) from a message
        """
        if len(stream_names) < 2:
            raise ValueError("Need at least two streams to synchronize")
        if len(set(stream_names)) != len(stream_names):
            raise ValueError(f"Duplicate stream names: {list(stream_names)}")
        if queue_size < 1:
            raise ValueError("queue_size must be >= 1")
        if tolerance <= 0:
            raise ValueError("tolerance must be > 0")

        self.stream_names = tuple(stream_names)
        self.callback = callback
        self.queue_size = queue_size
        self.tolerance = tolerance
        self._stamp_of = stamp_of
        self._queues: dict[str, dict[float, Any]] = {name: {} for name in self.stream_names}
        self._lock = threading.Lock()
        self.emitted_count = 0
        self.dropped_count = 0

    def add(self, stream_name: str, message: Any) -> bool:
        """
        Add a message to a stream and emit a tuple if one is now complete.

        The callback runs outside the internal lock. Its exceptions propagate
        to the caller; the matched messages are already consumed by then.

        Args:
            stream_name: Stream the message belongs to
            message: Message carrying a stamp

        Returns:
            True if a tuple was emitted
        """
        if stream_name not in self._queues:
            raise KeyError(f"Unknown stream: {stream_name}")

        stamp = self._stamp_of(message)
        with self._lock:
            queue = self._queues[stream_name]
            if stamp in queue:
                self.dropped_count += 1
                logger.debug(f"Replaced pending {stream_name} message at {stamp:.3f}")
            queue[stamp] = message

            matched = self._match(stream_name, stamp)
            if matched is None:
                self._evict_overflow(stream_name)
                return False

            messages = []
            for name, matched_stamp in zip(self.stream_names, matched):
                queue = self._queues[name]
                messages.append(queue.pop(matched_stamp))
                stale = [s for s in queue if s < matched_stamp]
                for s in stale:
                    del queue[s]
                self.dropped_count += len(stale)
            self.emitted_count += 1

        self.callback(*messages)
        return True

    def _evict_overflow(self, stream_name: str) -> None:
        """Drop the oldest messages of a stream beyond queue_size."""
        queue = self._queues[stream_name]
        while len(queue) > self.queue_size:
            oldest = min(queue)
            del queue[oldest]
            self.dropped_count += 1
            logger.debug(f"Dropped unmatched {stream_name} message at {oldest:.3f}")

    def _match(self, stream_name: str, stamp: float) -> tuple[float, ...] | None:
        """Find the closest combination of stamps around a new arrival."""
        candidates: list[list[float]] = []
        for name in self.stream_names:
            if name == stream_name:
                candidates.append([stamp])
                continue

            near = [s for s in self._queues[name] if abs(s - stamp) <= self.tolerance]
            if not near:
                return None
            candidates.append(sorted(near, key=lambda s: abs(s - stamp)))

        for combination in itertools.product(*candidates):
            if max(combination) - min(combination) < self.tolerance:
                return combination
        return None

    def pending(self, stream_name: str) -> int:
        """Number of unmatched messages waiting on a stream."""
        with self._lock:
            return len(self._queues[stream_name])

    def pending_counts(self) -> dict[str, int]:
        """Unmatched message count per stream."""
        with self._lock:
            return {name: len(queue) for name, queue in self._queues.items()}

    def clear(self) -> None:
        """Drop every pending message."""
        with self._lock:
            for queue in self._queues.values():
                queue.clear()
