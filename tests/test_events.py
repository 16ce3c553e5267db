import json
import logging

import httpx
import pytest

from charity_raffle.events import (
    CountdownStarted,
    Entry,
    FanoutEventSink,
    HttpEventSink,
    LoggingEventSink,
    MemoryEventSink,
    WinnerChosen,
    event_to_dict,
)


def test_event_to_dict():
    assert event_to_dict(Entry(user="u")) == {"event": "Entry", "user": "u"}
    assert event_to_dict(CountdownStarted(user="u", timestamp=7)) == {
        "event": "CountdownStarted",
        "user": "u",
        "timestamp": 7,
    }


def test_http_sink_posts_json():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.path, json.loads(request.content)))
        return httpx.Response(204)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    sink = HttpEventSink("https://hooks.example/raffle", client=client)
    sink.emit(WinnerChosen(user="w"))
    sink.close()

    assert seen == [("/raffle", {"event": "WinnerChosen", "user": "w"})]


def test_http_sink_raises_on_error_status():
    client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(500)))
    sink = HttpEventSink("https://hooks.example/raffle", client=client)
    with pytest.raises(httpx.HTTPStatusError):
        sink.emit(Entry(user="u"))


def test_fanout_and_logging(caplog):
    memory = MemoryEventSink()
    sink = FanoutEventSink([memory, LoggingEventSink()])
    with caplog.at_level(logging.INFO, logger="charity_raffle.events"):
        sink.emit(Entry(user="u"))
    assert memory.events == [Entry(user="u")]
    assert "Event Entry" in caplog.text
