"""
Fixed rules of the charity raffle.

These values define the public rules of the raffle.
Changing them changes who may enter and when a draw is allowed,
so they MUST be publicly announced.
"""

# Stake bounds, inclusive (raw units)
MIN_STAKE = 10_000_000_000_000
MAX_STAKE = 100_000_000_000_000

# Number of winners drawn before the raffle is completed
WINNERS_COUNT = 2

# Quorum: arms the countdown and is required for every draw
PLAYER_REQUIRED_TO_START = 5

# Minimum wait after the countdown is armed: 15 min in milliseconds
COUNTDOWN_MINIMUM_MS = 15 * 60 * 1000

# Default host seed for the randomness source (all ones, 8 bytes).
# Predictable by anyone: override it for any draw that matters.
RANDOM_SEED = bytes([1] * 8)

# Identities are 32-byte addresses
USER_ID_SIZE = 32
