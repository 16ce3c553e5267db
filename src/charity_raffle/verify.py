from __future__ import annotations

import json
from typing import Any, Dict

from .engine import Raffle
from .errors import RaffleError
from .events import MemoryEventSink
from .randomness import RecordingRandomSource, SequenceRandomSource


def load_audit(audit_path: str) -> Dict[str, Any]:
    with open(audit_path, "r", encoding="utf-8") as f:
        return json.load(f)


def replay_audit(audit: Dict[str, Any]) -> Dict[str, Any]:
    """
    Re-run every journalled call against a fresh raffle, feeding back the
    recorded timestamps and random values, and check that each call and the
    final state come out the same.
    """
    meta = audit["metadata"]
    raffle = Raffle(
        collector=meta["collector"],
        events=MemoryEventSink(),
        countdown_minimum=int(meta["countdown_minimum_ms"]),
        strict_countdown=bool(meta.get("strict_countdown", False)),
    )

    randoms = [c["random"] for c in audit["calls"] if c.get("random") is not None]
    source = SequenceRandomSource(randoms)

    for n, call in enumerate(audit["calls"]):
        now = int(call["now"])
        error = None
        winner = None
        recorder = RecordingRandomSource(source)
        try:
            if call["op"] == "register":
                raffle.register(call["caller"], int(call["amount"]), now)
            elif call["op"] == "draw":
                winner = raffle.draw(now, recorder)
            else:
                raise RuntimeError(f"Call #{n}: unknown op {call['op']!r}")
        except RaffleError as e:
            error = e.kind.value

        if error != call.get("error"):
            raise RuntimeError(
                f"Call #{n} outcome mismatch: audit={call.get('error')} recomputed={error}"
            )
        if call["op"] == "draw":
            # A rejected draw must not have consumed a random value.
            expected_random = call.get("random")
            got_random = recorder.values[0] if recorder.values else None
            if got_random != expected_random:
                raise RuntimeError(
                    f"Call #{n} random mismatch: audit={expected_random} recomputed={got_random}"
                )
            if winner != call.get("winner"):
                raise RuntimeError(
                    f"Call #{n} winner mismatch: audit={call.get('winner')} recomputed={winner}"
                )

    result = audit["result"]
    if list(raffle.winners) != list(result["winners"]):
        raise RuntimeError(
            f"Winners mismatch: audit={result['winners']} recomputed={list(raffle.winners)}"
        )
    if raffle.total_collected() != int(result["total_collected"]):
        raise RuntimeError(
            f"Total collected mismatch: audit={result['total_collected']} "
            f"recomputed={raffle.total_collected()}"
        )
    if raffle.count() != int(result["roster_size"]):
        raise RuntimeError(
            f"Roster size mismatch: audit={result['roster_size']} recomputed={raffle.count()}"
        )

    return {
        "ok": True,
        "winners": list(raffle.winners),
        "completed": raffle.is_completed(),
        "total_collected": raffle.total_collected(),
        "calls": len(audit["calls"]),
    }


def verify_audit(audit_path: str) -> Dict[str, Any]:
    return replay_audit(load_audit(audit_path))
