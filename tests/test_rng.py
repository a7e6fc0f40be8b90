from __future__ import annotations

import pytest

from pairs.rng import RNGManager


def test_same_seed_same_decks():
    a = RNGManager("seed-A")
    b = RNGManager("seed-A")
    assert a.deck_seed(5) == b.deck_seed(5)
    assert a.deck_rng(1).random() == b.deck_rng(1).random()


def test_str_seed_ignores_surrounding_whitespace():
    assert RNGManager(" seed-A\n").deck_seed(1) == RNGManager("seed-A").deck_seed(1)


def test_generations_and_seeds_differ():
    rngm = RNGManager(123)
    assert rngm.deck_seed(1) != rngm.deck_seed(2)
    assert RNGManager(123).deck_seed(1) != RNGManager(124).deck_seed(1)


def test_random_seed_is_logged(caplog):
    with caplog.at_level("INFO"):
        rngm = RNGManager(None)
    assert len(rngm.get_master_seed_hex()) == 32
    assert any(rngm.get_master_seed_hex() in rec.message for rec in caplog.records)


def test_random_seed_can_be_replayed():
    first = RNGManager(None)
    replay = RNGManager(bytes.fromhex(first.get_master_seed_hex()))
    assert replay.deck_seed(3) == first.deck_seed(3)


@pytest.mark.parametrize("seed", [1.5, True])
def test_unsupported_seed_types(seed):
    with pytest.raises(TypeError):
        RNGManager(seed)  # type: ignore[arg-type]


def test_negative_seed_rejected():
    with pytest.raises(ValueError):
        RNGManager(-1)
