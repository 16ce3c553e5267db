from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .events import FanoutEventSink, HttpEventSink, LoggingEventSink
from .host import RaffleHost
from .identity import parse_user
from .project_constants import COUNTDOWN_MINIMUM_MS, RANDOM_SEED
from .randomness import SeededRandomSource


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    collector: str
    countdown_minimum_ms: int = COUNTDOWN_MINIMUM_MS
    strict_countdown: bool = False
    random_seed: bytes = RANDOM_SEED
    event_webhook_url: Optional[str] = None
    http_timeout_s: float = 10.0

    @staticmethod
    def from_env(collector_override: str | None = None) -> "Settings":
        load_dotenv()

        # If the caller passes a collector, trust it over the environment.
        collector = (collector_override or os.getenv("RAFFLE_COLLECTOR", "")).strip()
        if not collector:
            raise RuntimeError(
                "Missing RAFFLE_COLLECTOR. Put it in .env or export it."
            )
        try:
            collector = parse_user(collector)
        except ValueError as e:
            raise RuntimeError(f"RAFFLE_COLLECTOR is not a valid identity: {e}") from e

        countdown_raw = os.getenv("RAFFLE_COUNTDOWN_MINIMUM_MS", "").strip()
        seed_raw = os.getenv("RAFFLE_RANDOM_SEED", "").strip()
        timeout_raw = os.getenv("RAFFLE_HTTP_TIMEOUT", "").strip()
        try:
            countdown_minimum_ms = int(countdown_raw) if countdown_raw else COUNTDOWN_MINIMUM_MS
            random_seed = bytes.fromhex(seed_raw) if seed_raw else RANDOM_SEED
            http_timeout_s = float(timeout_raw) if timeout_raw else 10.0
        except ValueError as e:
            raise RuntimeError(f"Invalid raffle setting in environment: {e}") from e

        if countdown_minimum_ms < 0:
            raise RuntimeError("RAFFLE_COUNTDOWN_MINIMUM_MS must not be negative.")

        webhook = os.getenv("RAFFLE_EVENT_WEBHOOK_URL", "").strip() or None

        return Settings(
            collector=collector,
            countdown_minimum_ms=countdown_minimum_ms,
            strict_countdown=_env_flag("RAFFLE_STRICT_COUNTDOWN"),
            random_seed=random_seed,
            event_webhook_url=webhook,
            http_timeout_s=http_timeout_s,
        )

    def build_host(self) -> RaffleHost:
        sinks = [LoggingEventSink()]
        if self.event_webhook_url:
            sinks.append(HttpEventSink(self.event_webhook_url, timeout_s=self.http_timeout_s))

        return RaffleHost(
            collector=self.collector,
            randomness=SeededRandomSource(self.random_seed),
            events=FanoutEventSink(sinks),
            countdown_minimum=self.countdown_minimum_ms,
            strict_countdown=self.strict_countdown,
        )
