from __future__ import annotations

from typing import Optional


class CountdownGate:
    """One-shot timer. Goes from unarmed to armed once and stays armed."""

    def __init__(self) -> None:
        self.started_at: Optional[int] = None

    @property
    def is_armed(self) -> bool:
        return self.started_at is not None

    def arm(self, now: int) -> None:
        if self.started_at is not None:
            raise RuntimeError(
                f"Countdown already armed at {self.started_at}; it cannot be re-armed."
            )
        self.started_at = now

    def is_elapsed(self, now: int, minimum_wait: int) -> bool:
        # An unarmed gate does not block.
        if self.started_at is None:
            return True
        return now - self.started_at >= minimum_wait

    def remaining(self, now: int, minimum_wait: int) -> int:
        if self.started_at is None:
            return 0
        return max(0, minimum_wait - (now - self.started_at))
