"""
Tests for services/live_update_service.py — SSE fan-out broker.
"""
import json

from services.live_update_service import KEEPALIVE, LiveUpdateBroker, format_event


def _decode(frame):
    assert frame.startswith("data: ") and frame.endswith("\n\n")
    return json.loads(frame[len("data: "):])


class TestFormatEvent:

    def test_frame_shape(self):
        assert format_event({"type": "x"}) == 'data: {"type": "x"}\n\n'


class TestBroker:
    """Tests for LiveUpdateBroker."""

    def test_broadcast_reaches_only_that_article(self):
        broker = LiveUpdateBroker()
        _, q1 = broker.subscribe(1, 10)
        _, q2 = broker.subscribe(1, 11)
        _, other = broker.subscribe(2, 12)

        sent = broker.broadcast(1, {"type": "article-updated"})

        assert sent == 2
        assert _decode(q1.get_nowait())["type"] == "article-updated"
        assert _decode(q2.get_nowait())["type"] == "article-updated"
        assert other.empty()

    def test_broadcast_without_subscribers(self):
        assert LiveUpdateBroker().broadcast(99, {"type": "x"}) == 0

    def test_unsubscribe_drops_empty_article(self):
        broker = LiveUpdateBroker()
        client_id, _ = broker.subscribe(5, 1)
        assert broker.subscriber_count(5) == 1
        broker.unsubscribe(5, client_id)
        assert broker.subscriber_count(5) == 0
        assert 5 not in broker._clients

    def test_unsubscribe_unknown_is_harmless(self):
        LiveUpdateBroker().unsubscribe(404, "nobody")

    def test_client_ids_are_unique(self):
        broker = LiveUpdateBroker()
        first, _ = broker.subscribe(1, 7)
        second, _ = broker.subscribe(1, 7)
        assert first != second
        assert first.startswith("7-")


class TestStream:
    """Tests for LiveUpdateBroker.stream()."""

    def test_connected_then_events_then_cleanup(self):
        broker = LiveUpdateBroker()
        stream = broker.stream(3, 42, keepalive=1)

        connected = _decode(next(stream))
        assert connected["type"] == "connected"
        assert connected["clientId"].startswith("42-")
        assert broker.subscriber_count(3) == 1

        broker.broadcast(3, {"type": "comment-added", "comment": {"id": 1}})
        assert _decode(next(stream))["comment"] == {"id": 1}

        stream.close()
        assert broker.subscriber_count(3) == 0

    def test_keepalive_when_idle(self):
        broker = LiveUpdateBroker()
        stream = broker.stream(4, 1, keepalive=0.01)
        next(stream)
        assert next(stream) == KEEPALIVE
        stream.close()
