from __future__ import annotations

import json
import random

from pairs.__main__ import main
from pairs.autoplay import AutoPlayer
from pairs.config import GameConfig
from pairs.loop import RunnerConfig, SessionRunner
from pairs.session import Session
from pairs.state import GameOutcome


def make_session(**overrides) -> Session:
    values = {"seed": "autoplay"}
    values.update(overrides)
    session = Session(GameConfig(**values))
    session.new_game()
    return session


def test_runner_stops_after_max_steps():
    session = make_session()
    runner = SessionRunner(session, RunnerConfig(tick_rate=0, max_steps=5, fixed_dt=0.25))
    assert runner.run() is GameOutcome.IN_PROGRESS
    assert runner.step == 5
    assert runner.running is False
    assert session.clock == 1.25


def test_runner_update_ignored_when_stopped():
    session = make_session()
    runner = SessionRunner(session, RunnerConfig(fixed_dt=1.0))
    runner.update(1.0)
    assert runner.step == 0
    runner.start()
    runner.start()
    runner.update(0.0)
    assert runner.step == 1
    assert session.clock == 1.0


def test_autoplayer_wins_default_board_in_time():
    session = make_session()
    player = AutoPlayer(session, random.Random(0))
    runner = SessionRunner(session, RunnerConfig(tick_rate=0, fixed_dt=0.25, max_steps=10_000), on_step=player.step)
    assert runner.run() is GameOutcome.WON
    assert session.state.timer.remaining_seconds > 0
    # 8 pairs can never take fewer than 16 flips
    assert player.moves >= 16


def test_autoplayer_runs_out_of_time_on_short_clock():
    session = make_session(timer_duration_seconds=1, mismatch_revert_delay_seconds=5.0)
    player = AutoPlayer(session, random.Random(0))
    runner = SessionRunner(session, RunnerConfig(tick_rate=0, fixed_dt=0.5, max_steps=100), on_step=player.step)
    assert runner.run() is GameOutcome.LOST


def test_autoplayer_completes_known_pair():
    session = make_session(grid_size=4, symbol_catalog=["A", "B"])
    player = AutoPlayer(session, random.Random(1))
    deck = session.deck
    # reveal a mismatched pair so the player learns two faces
    other = next(j for j in range(1, 4) if deck.face(j) != deck.face(0))
    session.select(0)
    session.select(other)
    session.advance(1.0)
    assert set(player.seen) == {0, other}

    first = player.step()
    second = player.step()
    assert deck.face(first) == deck.face(second)
    player.forget()
    assert player.seen == {}


def test_cli_plays_a_game_and_prints_json(capsys):
    code = main(["--seed", "cli", "--fixed-dt", "0.25", "--tick-rate", "0", "--max-steps", "10000"])
    lines = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    summary = lines[-1]
    assert summary["kind"] == "summary"
    assert summary["outcome"] == "won"
    assert code == 0
    kinds = {line["kind"] for line in lines[:-1]}
    assert {"reveal_card", "mark_matched", "timer_started", "game_won"} <= kinds


def test_cli_reports_configuration_errors(capsys):
    assert main(["--grid-size", "7"]) == 2
    assert "configuration error" in capsys.readouterr().err
