"""
Live update service — server-sent events for open article sessions.

Keeps an in-memory map of article_id -> {client_id: queue}. Broadcasting
puts the encoded event on every subscriber's queue; each open stream
drains its own queue. Single process only, queues are unbounded, nothing
is persisted and there is no delivery guarantee.
"""
import itertools
import json
import logging
import queue
import threading
import time

logger = logging.getLogger(__name__)

KEEPALIVE = ": keepalive\n\n"


def format_event(payload):
    """Encode one SSE data frame."""
    return f"data: {json.dumps(payload, default=str)}\n\n"


class LiveUpdateBroker:
    """Per-article fan-out of JSON events to open SSE streams."""

    def __init__(self):
        self._lock = threading.Lock()
        self._clients = {}
        self._counter = itertools.count(1)

    def subscribe(self, article_id, user_id):
        """Register a new stream; returns (client_id, queue)."""
        client_id = f"{user_id}-{int(time.time() * 1000)}-{next(self._counter)}"
        q = queue.Queue()
        with self._lock:
            self._clients.setdefault(article_id, {})[client_id] = q
        logger.info("[OK] Live client %s joined article %s", client_id, article_id)
        return client_id, q

    def unsubscribe(self, article_id, client_id):
        with self._lock:
            clients = self._clients.get(article_id)
            if clients is None:
                return
            clients.pop(client_id, None)
            if not clients:
                del self._clients[article_id]
        logger.info("[--] Live client %s left article %s", client_id, article_id)

    def subscriber_count(self, article_id):
        with self._lock:
            return len(self._clients.get(article_id) or {})

    def broadcast(self, article_id, payload):
        """Queue payload for every stream on article_id; returns how many."""
        with self._lock:
            targets = list((self._clients.get(article_id) or {}).values())
        if not targets:
            return 0
        frame = format_event(payload)
        for q in targets:
            q.put(frame)
        logger.info(
            "[OK] Broadcast %s to %d clients on article %s",
            payload.get("type"), len(targets), article_id,
        )
        return len(targets)

    def stream(self, article_id, user_id, keepalive=15):
        """
        SSE generator for one client.

        Yields the 'connected' frame, then queued frames, with a keepalive
        comment whenever the queue stays empty for `keepalive` seconds.
        Unsubscribes when the consumer closes the generator.
        """
        client_id, q = self.subscribe(article_id, user_id)
        try:
            yield format_event({"type": "connected", "clientId": client_id})
            while True:
                try:
                    yield q.get(timeout=keepalive)
                except queue.Empty:
                    yield KEEPALIVE
        finally:
            self.unsubscribe(article_id, client_id)


broker = LiveUpdateBroker()
