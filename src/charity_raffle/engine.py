from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from .countdown import CountdownGate
from .errors import (
    AlreadyRegistered,
    Completed,
    CountdownNotElapsed,
    InvalidEntryAmount,
    TooFewParticipants,
)
from .events import CountdownStarted, Entry, Event, EventSink, LoggingEventSink, WinnerChosen
from .project_constants import (
    COUNTDOWN_MINIMUM_MS,
    MAX_STAKE,
    MIN_STAKE,
    PLAYER_REQUIRED_TO_START,
    WINNERS_COUNT,
)
from .randomness import RandomSource, pick_index
from .registry import ParticipantPool, User

log = logging.getLogger(__name__)


class Raffle:
    """
    The raffle state machine.

    Every operation validates first and mutates after, so a rejected call
    leaves the pool, the countdown and the winners exactly as they were.
    Time and randomness are supplied by the caller on every call.
    """

    def __init__(
        self,
        collector: User,
        events: Optional[EventSink] = None,
        countdown_minimum: int = COUNTDOWN_MINIMUM_MS,
        strict_countdown: bool = False,
    ) -> None:
        self.collector = collector
        self.events: EventSink = events if events is not None else LoggingEventSink()
        self.countdown_minimum = countdown_minimum
        # When set, draws are refused until the countdown has been armed and elapsed.
        self.strict_countdown = strict_countdown

        self.pool = ParticipantPool()
        self.countdown = CountdownGate()
        self._winners: List[User] = []

    # -- queries --

    def count(self) -> int:
        return self.pool.count()

    def total_collected(self) -> int:
        return self.pool.total_collected

    def winners_count(self) -> int:
        return len(self._winners)

    def is_completed(self) -> bool:
        return self.winners_count() == WINNERS_COUNT

    def winners_address(self) -> Tuple[Optional[User], Optional[User]]:
        if not self._winners:
            return None, None
        return self._winners[0], self._winners[-1]

    @property
    def winners(self) -> Tuple[User, ...]:
        return tuple(self._winners)

    @property
    def countdown_started_at(self) -> Optional[int]:
        return self.countdown.started_at

    # -- mutations --

    def register(self, user: User, stake: int, now: int) -> None:
        if self.is_completed():
            raise Completed("Raffle already has all its winners.")

        if not isinstance(stake, int) or isinstance(stake, bool):
            raise InvalidEntryAmount(f"Stake must be an integer, got {type(stake).__name__}.")

        if stake < MIN_STAKE or stake > MAX_STAKE:
            raise InvalidEntryAmount(
                f"Stake {stake} outside [{MIN_STAKE}, {MAX_STAKE}]."
            )

        if user in self.pool:
            raise AlreadyRegistered(f"{user} already has an entry.")

        pending: List[Event] = []
        self.pool.add(user, stake)
        pending.append(Entry(user=user))
        log.debug("Entry %s stake=%d count=%d", user, stake, self.count())

        if not self.countdown.is_armed and self.count() >= PLAYER_REQUIRED_TO_START:
            self.countdown.arm(now)
            pending.append(CountdownStarted(user=user, timestamp=now))
            log.debug("Countdown armed at %d by %s", now, user)

        self._publish(pending)

    def draw(self, now: int, randomness: RandomSource) -> User:
        """Draw exactly one winner and take them off the roster."""
        if self.countdown.is_armed:
            if not self.countdown.is_elapsed(now, self.countdown_minimum):
                left = self.countdown.remaining(now, self.countdown_minimum)
                raise CountdownNotElapsed(f"Countdown still running ({left} ms left).")
        elif self.strict_countdown:
            raise CountdownNotElapsed("Countdown has not been armed yet.")

        if self.is_completed():
            raise Completed("Raffle already has all its winners.")

        # Quorum counts everyone who entered, winners included.
        entrants = self.pool.entrants()
        if entrants < PLAYER_REQUIRED_TO_START:
            raise TooFewParticipants(
                f"{entrants} participants, {PLAYER_REQUIRED_TO_START} required."
            )

        # Cache it, the roster is about to change
        user_count = self.count()

        random_value = randomness.next_u32()
        index = pick_index(random_value, user_count)
        winner = self.pool.pick(index)

        self._winners.append(winner)
        self.pool.remove_at(index)
        log.debug(
            "Winner %s (random=%d index=%d) winners=%d",
            winner,
            random_value,
            index,
            self.winners_count(),
        )

        self._publish([WinnerChosen(user=winner)])
        return winner

    def _publish(self, pending: List[Event]) -> None:
        # State is already committed here; delivery failures are logged, not raised.
        for event in pending:
            try:
                self.events.emit(event)
            except Exception:
                log.exception("Event delivery failed for %s", type(event).__name__)
