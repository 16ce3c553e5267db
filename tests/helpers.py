from __future__ import annotations

from charity_raffle.identity import user_from_bytes


def make_user(n: int) -> str:
    return user_from_bytes(bytes([n]) * 32)


class FixedRandom:
    def __init__(self, *values: int) -> None:
        self.values = list(values)
        self.calls = 0

    def next_u32(self) -> int:
        value = self.values[self.calls]
        self.calls += 1
        return value
