from __future__ import annotations

from typing import Dict, List, Tuple

User = str


class ParticipantPool:
    """
    Membership map plus an index-addressable roster.

    `stakes` remembers everyone who ever entered (winners included), so it
    never shrinks. `roster` holds only the participants still in the running
    and is what the draw indexes into.
    """

    def __init__(self) -> None:
        self.stakes: Dict[User, int] = {}
        self.roster: List[User] = []
        # Sum of every stake ever added. Not reduced when winners leave the roster.
        self.total_collected = 0

    def __contains__(self, user: User) -> bool:
        return user in self.stakes

    def count(self) -> int:
        return len(self.roster)

    def entrants(self) -> int:
        """Everyone who ever entered, winners included."""
        return len(self.stakes)

    def stake_of(self, user: User) -> int:
        return self.stakes[user]

    def add(self, user: User, stake: int) -> None:
        if user in self.stakes:
            raise RuntimeError(f"{user} is already in the pool (unexpected).")
        self.stakes[user] = stake
        self.roster.append(user)
        self.total_collected += stake

    def pick(self, index: int) -> User:
        return self.roster[index]

    def remove_at(self, index: int) -> User:
        """Swap-remove roster[index] in O(1). Roster order is not preserved."""
        last = len(self.roster) - 1
        if index < 0 or index > last:
            raise IndexError(f"Roster index {index} out of range (size {last + 1}).")

        removed = self.roster[index]
        tail = self.roster.pop()
        if index != last:
            self.roster[index] = tail
        return removed

    def snapshot(self) -> Tuple[Tuple[User, ...], int]:
        return tuple(self.roster), self.total_collected
