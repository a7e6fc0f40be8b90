from __future__ import annotations

import pytest

from pairs.commands import GameWon, HideCard, RevealCard
from pairs.events import ALL_COMMANDS, EventBus


def test_kind_subscribers_then_wildcard():
    bus = EventBus()
    calls = []
    bus.subscribe(RevealCard.kind, lambda c: calls.append(("reveal", c)))
    bus.subscribe(ALL_COMMANDS, lambda c: calls.append(("all", c)))

    bus.publish(RevealCard(3))
    bus.publish(HideCard(3))

    assert calls == [("reveal", RevealCard(3)), ("all", RevealCard(3)), ("all", HideCard(3))]


def test_subscribe_is_deduplicated_and_unsubscribe():
    bus = EventBus()
    calls = []
    handler = calls.append
    bus.subscribe(GameWon.kind, handler)
    bus.subscribe(GameWon.kind, handler)
    bus.publish(GameWon())
    assert calls == [GameWon()]

    bus.unsubscribe(GameWon.kind, handler)
    bus.unsubscribe(GameWon.kind, handler)
    bus.publish(GameWon())
    assert calls == [GameWon()]


def test_failing_subscriber_does_not_stop_others(caplog):
    bus = EventBus()
    calls = []

    def broken(_cmd):
        raise ValueError("boom")

    bus.subscribe(ALL_COMMANDS, broken)
    bus.subscribe(ALL_COMMANDS, calls.append)
    with caplog.at_level("ERROR"):
        bus.publish(RevealCard(0))
    assert calls == [RevealCard(0)]
    assert any("reveal_card" in rec.message for rec in caplog.records)


def test_non_callable_rejected_and_clear():
    bus = EventBus()
    with pytest.raises(TypeError):
        bus.subscribe(ALL_COMMANDS, "nope")  # type: ignore[arg-type]
    calls = []
    bus.subscribe(ALL_COMMANDS, calls.append)
    bus.clear()
    bus.publish(RevealCard(1))
    assert calls == []
