"""
Live snapshot feeds.

Writers call ``ChangeHub.notify`` with the channels they touched. Each open
``Subscription`` waits on its channel, re-reads the data when the channel
moves and yields the full snapshot if it changed.
"""
import json
import logging
import threading
from collections import defaultdict

logger = logging.getLogger(__name__)

HEARTBEAT = object()


class ChangeHub:
    def __init__(self):
        self._cond = threading.Condition()
        self._versions = defaultdict(int)

    def notify(self, *channels):
        with self._cond:
            for channel in channels:
                self._versions[channel] += 1
            self._cond.notify_all()

    def version(self, channel) -> int:
        with self._cond:
            return self._versions[channel]

    def wait(self, channel, seen_version, timeout, stop=None) -> int:
        """
        Block until the channel moves past ``seen_version``, ``stop()`` turns
        true after a ``wake`` or ``timeout`` elapses.
        """
        with self._cond:
            self._cond.wait_for(
                lambda: self._versions[channel] != seen_version or (stop is not None and stop()),
                timeout=timeout,
            )
            return self._versions[channel]

    def wake(self):
        with self._cond:
            self._cond.notify_all()


class Subscription:
    """
    Iterates full snapshots of one channel until closed.

    ``fetch`` is called for the initial snapshot and again every time the
    channel moves. ``HEARTBEAT`` is yielded when ``heartbeat`` seconds pass
    without a change.
    """

    def __init__(self, hub: ChangeHub, channel: str, fetch, heartbeat: float = 15.0):
        self.hub = hub
        self.channel = channel
        self.fetch = fetch
        self.heartbeat = heartbeat
        self.closed = False

    def __iter__(self):
        version = self.hub.version(self.channel)
        snapshot = self.fetch()
        yield snapshot
        while not self.closed:
            new_version = self.hub.wait(self.channel, version, self.heartbeat, stop=lambda: self.closed)
            if self.closed:
                break
            if new_version == version:
                yield HEARTBEAT
                continue
            version = new_version
            fresh = self.fetch()
            if fresh != snapshot:
                snapshot = fresh
                yield snapshot

    def close(self):
        self.closed = True
        self.hub.wake()


def format_sse(payload) -> str:
    if payload is HEARTBEAT:
        return ": keep-alive\n\n"
    return f"event: snapshot\ndata: {json.dumps(payload)}\n\n"


def sse_events(subscription: Subscription, label: str):
    """Render a subscription as server-sent events; always releases it."""
    logger.info(f"📡 Stream opened: {label}")
    try:
        for payload in subscription:
            yield format_sse(payload)
    finally:
        subscription.close()
        logger.info(f"📴 Stream closed: {label}")
