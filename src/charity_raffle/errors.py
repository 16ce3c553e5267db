from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    COMPLETED = "Completed"
    INVALID_ENTRY_AMOUNT = "InvalidEntryAmount"
    ALREADY_REGISTERED = "AlreadyRegistered"
    COUNTDOWN_NOT_ELAPSED = "CountdownNotElapsed"
    TOO_FEW_PARTICIPANTS = "TooFewParticipants"


class RaffleError(RuntimeError):
    """Base for every rejection the raffle can return. State is left untouched."""

    kind: ErrorKind


class Completed(RaffleError):
    kind = ErrorKind.COMPLETED


class InvalidEntryAmount(RaffleError):
    kind = ErrorKind.INVALID_ENTRY_AMOUNT


class AlreadyRegistered(RaffleError):
    kind = ErrorKind.ALREADY_REGISTERED


class CountdownNotElapsed(RaffleError):
    kind = ErrorKind.COUNTDOWN_NOT_ELAPSED


class TooFewParticipants(RaffleError):
    kind = ErrorKind.TOO_FEW_PARTICIPANTS
