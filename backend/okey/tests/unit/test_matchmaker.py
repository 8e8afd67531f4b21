"""
Unit tests for seat filling.
"""

import random

import pytest

from okey.logic.bot import BOT_ID_PREFIX, is_bot_identity
from okey.logic.matchmaker import fill_seats
from okey.logic.state import Player


def _humans(*names):
    return [Player(id=name.lower(), name=name) for name in names]


class TestFillSeats:
    def test_one_human_three_bots(self):
        """fill_seats with 1 human returns 4 seats, 3 of them bots named in seat order."""
        seats = fill_seats(_humans("Alice"))

        assert len(seats) == 4
        humans = [p for p in seats if not p.is_bot]
        bots = [p for p in seats if p.is_bot]
        assert [p.name for p in humans] == ["Alice"]
        assert [p.name for p in bots] == ["Bot 1", "Bot 2", "Bot 3"]
        assert all(p.id.startswith(BOT_ID_PREFIX) for p in bots)

    def test_bot_ids_are_unique(self):
        seats = fill_seats(_humans("Alice"))
        assert len({p.id for p in seats}) == 4

    def test_same_seed_same_seats(self):
        first = fill_seats(_humans("Alice", "Bob"), random.Random(5))
        second = fill_seats(_humans("Alice", "Bob"), random.Random(5))
        assert [p.name for p in first] == [p.name for p in second]

    def test_different_seeds_move_the_human(self):
        seats = set()
        for seed in range(20):
            placed = fill_seats(_humans("Alice"), random.Random(seed))
            seats.add(next(i for i, p in enumerate(placed) if not p.is_bot))
        assert len(seats) > 1

    def test_four_humans_no_bots(self):
        seats = fill_seats(_humans("Alice", "Bob", "Charlie", "Dave"), random.Random(1))
        assert sorted(p.name for p in seats) == ["Alice", "Bob", "Charlie", "Dave"]
        assert not any(is_bot_identity(p.id) for p in seats)


class TestFillSeatsValidation:
    def test_empty_rejected(self):
        with pytest.raises(ValueError, match="Expected 1 to 4"):
            fill_seats([])

    def test_five_rejected(self):
        with pytest.raises(ValueError, match="Expected 1 to 4"):
            fill_seats(_humans("A", "B", "C", "D", "E"))

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError, match="unique"):
            fill_seats([Player(id="same", name="A"), Player(id="same", name="B")])

    def test_bot_prefix_rejected(self):
        with pytest.raises(ValueError, match="bot prefix"):
            fill_seats([Player(id="bot-sneaky", name="Sneaky")])
