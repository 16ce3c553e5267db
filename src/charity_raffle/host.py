from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from .engine import Raffle
from .errors import RaffleError
from .events import EventSink
from .identity import parse_user
from .project_constants import (
    COUNTDOWN_MINIMUM_MS,
    MAX_STAKE,
    MIN_STAKE,
    PLAYER_REQUIRED_TO_START,
    WINNERS_COUNT,
)
from .randomness import RandomSource, RecordingRandomSource, SeededRandomSource

log = logging.getLogger(__name__)


class Clock(Protocol):
    def now_ms(self) -> int: ...


class SystemClock:
    def now_ms(self) -> int:
        return time.monotonic_ns() // 1_000_000


class ManualClock:
    def __init__(self, start: int = 0) -> None:
        self.current = start

    def now_ms(self) -> int:
        return self.current

    def set(self, value: int) -> None:
        if value < self.current:
            raise ValueError(f"Clock cannot go backwards ({value} < {self.current}).")
        self.current = value

    def advance(self, delta_ms: int) -> None:
        self.set(self.current + delta_ms)


class RaffleHost:
    """
    Thin adapter around the engine: supplies caller identity, time and
    randomness, and keeps a journal of every attempted call so the whole
    raffle can be replayed and checked later.
    """

    def __init__(
        self,
        collector: str,
        randomness: Optional[RandomSource] = None,
        events: Optional[EventSink] = None,
        clock: Optional[Clock] = None,
        countdown_minimum: int = COUNTDOWN_MINIMUM_MS,
        strict_countdown: bool = False,
    ) -> None:
        self.raffle = Raffle(
            collector=parse_user(collector),
            events=events,
            countdown_minimum=countdown_minimum,
            strict_countdown=strict_countdown,
        )
        self.randomness = randomness or SeededRandomSource()
        self.clock = clock or SystemClock()
        self.journal: List[Dict[str, Any]] = []

    def enter(self, caller: str, amount: int) -> None:
        user = parse_user(caller)
        now = self.clock.now_ms()
        record: Dict[str, Any] = {
            "op": "register",
            "caller": user,
            "amount": amount,
            "now": now,
            "error": None,
        }
        try:
            self.raffle.register(user, amount, now)
        except RaffleError as e:
            record["error"] = e.kind.value
            log.warning("Entry rejected for %s: %s (%s)", user, e.kind.value, e)
            raise
        finally:
            self.journal.append(record)

        log.info(
            "Entry accepted     : %s (count=%d, total=%d)",
            user,
            self.raffle.count(),
            self.raffle.total_collected(),
        )

    def draw(self, caller: str) -> str:
        user = parse_user(caller)
        now = self.clock.now_ms()
        recorder = RecordingRandomSource(self.randomness)
        record: Dict[str, Any] = {
            "op": "draw",
            "caller": user,
            "now": now,
            "random": None,
            "winner": None,
            "error": None,
        }
        try:
            winner = self.raffle.draw(now, recorder)
            record["winner"] = winner
        except RaffleError as e:
            record["error"] = e.kind.value
            log.warning("Draw rejected for %s: %s (%s)", user, e.kind.value, e)
            raise
        finally:
            if recorder.values:
                record["random"] = recorder.values[0]
            self.journal.append(record)

        log.info(
            "Winner drawn       : %s (winners=%d/%d, remaining=%d)",
            winner,
            self.raffle.winners_count(),
            WINNERS_COUNT,
            self.raffle.count(),
        )
        return winner

    def audit(self) -> Dict[str, Any]:
        roster, total = self.raffle.pool.snapshot()
        return {
            "metadata": {
                "tool": "charity-raffle",
                "version": "1.0.0",
                "generated_at_utc": datetime.now(timezone.utc).isoformat(),
                "collector": self.raffle.collector,
                "countdown_minimum_ms": self.raffle.countdown_minimum,
                "strict_countdown": self.raffle.strict_countdown,
                "min_stake": MIN_STAKE,
                "max_stake": MAX_STAKE,
                "players_required": PLAYER_REQUIRED_TO_START,
                "winners_count": WINNERS_COUNT,
                "countdown_started_at": self.raffle.countdown_started_at,
            },
            "calls": list(self.journal),
            "result": {
                "winners": list(self.raffle.winners),
                "completed": self.raffle.is_completed(),
                # big ints; store as string for safety
                "total_collected": str(total),
                "roster_size": len(roster),
            },
        }

    def write_audit(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.audit(), f, indent=2)
        log.info("Wrote audit: %s", path)
