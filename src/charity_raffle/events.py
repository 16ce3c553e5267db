from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Optional, Protocol, Union

import httpx

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Entry:
    user: str


@dataclass(frozen=True)
class CountdownStarted:
    user: str
    timestamp: int


@dataclass(frozen=True)
class WinnerChosen:
    user: str


Event = Union[Entry, CountdownStarted, WinnerChosen]


def event_to_dict(event: Event) -> Dict[str, Any]:
    return {"event": type(event).__name__, **asdict(event)}


class EventSink(Protocol):
    def emit(self, event: Event) -> None: ...


class MemoryEventSink:
    def __init__(self) -> None:
        self.events: List[Event] = []

    def emit(self, event: Event) -> None:
        self.events.append(event)

    def of_type(self, kind: type) -> List[Event]:
        return [e for e in self.events if isinstance(e, kind)]


class LoggingEventSink:
    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or log

    def emit(self, event: Event) -> None:
        self.logger.info("Event %s: %s", type(event).__name__, asdict(event))


class HttpEventSink:
    """POSTs every event as JSON to a webhook. Delivery errors propagate."""

    def __init__(
        self,
        url: str,
        timeout_s: float = 10.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.url = url
        self.client = client or httpx.Client(timeout=timeout_s)

    def close(self) -> None:
        self.client.close()

    def emit(self, event: Event) -> None:
        resp = self.client.post(self.url, json=event_to_dict(event))
        resp.raise_for_status()


class FanoutEventSink:
    def __init__(self, sinks: Iterable[EventSink]) -> None:
        self.sinks = list(sinks)

    def emit(self, event: Event) -> None:
        for sink in self.sinks:
            sink.emit(event)
