import json
import logging

import httpx
import pytest

from charity_raffle.errors import AlreadyRegistered, Completed, CountdownNotElapsed
from charity_raffle.events import HttpEventSink, MemoryEventSink
from charity_raffle.host import ManualClock, RaffleHost
from charity_raffle.project_constants import COUNTDOWN_MINIMUM_MS, MIN_STAKE
from charity_raffle.randomness import SeededRandomSource
from charity_raffle.verify import replay_audit, verify_audit
from helpers import make_user

STAKE = MIN_STAKE + 100


def _played_host():
    clock = ManualClock(1_000)
    host = RaffleHost(
        collector=make_user(99),
        randomness=SeededRandomSource(b"test-seed"),
        events=MemoryEventSink(),
        clock=clock,
    )
    for i in range(5):
        host.enter(make_user(i + 1), STAKE)
    with pytest.raises(AlreadyRegistered):
        host.enter(make_user(1), STAKE)
    with pytest.raises(CountdownNotElapsed):
        host.draw(make_user(1))
    clock.advance(COUNTDOWN_MINIMUM_MS)
    host.draw(make_user(1))
    host.draw(make_user(2))
    with pytest.raises(Completed):
        host.draw(make_user(3))
    return host


def test_host_journals_every_call():
    host = _played_host()
    ops = [(c["op"], c["error"]) for c in host.journal]
    assert ops == [("register", None)] * 5 + [
        ("register", "AlreadyRegistered"),
        ("draw", "CountdownNotElapsed"),
        ("draw", None),
        ("draw", None),
        ("draw", "Completed"),
    ]
    draws = [c for c in host.journal if c["op"] == "draw"]
    assert [c["random"] is not None for c in draws] == [False, True, True, False]
    assert [c["winner"] for c in draws[1:3]] == list(host.raffle.winners)


def test_host_rejects_malformed_caller():
    host = RaffleHost(collector=make_user(99), clock=ManualClock())
    with pytest.raises(ValueError):
        host.enter("not-an-address", STAKE)
    assert host.journal == []


def test_audit_round_trip(tmp_path):
    host = _played_host()
    path = tmp_path / "audit.json"
    host.write_audit(str(path))

    result = verify_audit(str(path))
    assert result["ok"]
    assert result["completed"]
    assert result["winners"] == list(host.raffle.winners)
    assert result["total_collected"] == STAKE * 5


def test_audit_detects_tampered_random(tmp_path):
    audit = _played_host().audit()
    audit = json.loads(json.dumps(audit))
    draw = next(c for c in audit["calls"] if c["random"] is not None)
    draw["random"] ^= 1
    with pytest.raises(RuntimeError):
        replay_audit(audit)


def test_audit_detects_tampered_winners():
    audit = json.loads(json.dumps(_played_host().audit()))
    audit["result"]["winners"].reverse()
    with pytest.raises(RuntimeError):
        replay_audit(audit)


def test_webhook_failure_keeps_journal_replayable(caplog):
    client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(500)))
    webhook = HttpEventSink("https://hooks.example/raffle", client=client)
    clock = ManualClock(1_000)
    host = RaffleHost(
        collector=make_user(99),
        randomness=SeededRandomSource(b"test-seed"),
        events=webhook,
        clock=clock,
    )
    for i in range(6):
        host.enter(make_user(i + 1), STAKE)
    clock.advance(COUNTDOWN_MINIMUM_MS)
    with caplog.at_level(logging.ERROR, logger="charity_raffle.engine"):
        winner = host.draw(make_user(1))
    assert "Event delivery failed" in caplog.text

    assert host.raffle.winners == (winner,)
    assert host.journal[-1]["winner"] == winner
    assert host.journal[-1]["error"] is None
    assert replay_audit(json.loads(json.dumps(host.audit())))["ok"]
    webhook.close()
