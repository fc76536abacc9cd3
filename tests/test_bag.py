import random

import pytest

from block_stacker.game.bag import RandomizerBag
from block_stacker.game.pieces import SHAPES


def test_each_bag_is_a_permutation():
    bag = RandomizerBag(random.Random(3))
    for _ in range(20):
        drawn = [bag.produce() for _ in range(7)]
        assert sorted(s.name for s in drawn) == sorted(s.name for s in SHAPES)


def test_peek_matches_future_draws_across_bag_boundary():
    bag = RandomizerBag(random.Random(11))
    for _ in range(4):
        bag.produce()
    expected = bag.upcoming(7)
    assert [bag.produce() for _ in range(7)] == expected


def test_peek_does_not_consume():
    bag = RandomizerBag(random.Random(5))
    first = bag.peek(1)
    assert bag.peek(1) is first
    assert bag.produce() is first


def test_peek_clamped_to_one_bag():
    bag = RandomizerBag(random.Random(8))
    assert bag.peek(12) is bag.peek(7)
    assert len(bag.upcoming(10)) == 7
    with pytest.raises(ValueError):
        bag.peek(0)


def test_same_seed_same_sequence():
    a = RandomizerBag(random.Random(42))
    b = RandomizerBag(random.Random(42))
    assert [a.produce() for _ in range(21)] == [b.produce() for _ in range(21)]
