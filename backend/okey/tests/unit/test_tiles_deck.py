import random
from collections import Counter

import pytest
from pydantic import ValidationError

from okey.logic.deck import (
    DEALER_HAND_SIZE,
    DRAW_PILE_SIZE,
    FAKE_INDICATOR_FALLBACK,
    HAND_SIZE,
    NUM_SEATS,
    create_deck,
    distribute,
    resolve_joker,
)
from okey.logic.enums import TileColor
from okey.logic.tiles import (
    TOTAL_TILES,
    JokerIdentity,
    Tile,
    create_tile_set,
    fake_joker_id,
    find_tile,
    numbered_tile_id,
)
from okey.tests.helpers.rooms import fake, tile


class TestTileSet:
    def test_full_set_has_106_distinct_ids(self):
        tiles = create_tile_set()
        assert len(tiles) == TOTAL_TILES == 106
        assert len({t.id for t in tiles}) == TOTAL_TILES

    def test_two_copies_of_each_numbered_tile(self):
        counts = Counter((t.color, t.value) for t in create_tile_set() if not t.is_fake_joker)
        assert len(counts) == 4 * 13
        assert set(counts.values()) == {2}

    def test_two_fake_jokers(self):
        fakes = [t for t in create_tile_set() if t.is_fake_joker]
        assert [t.id for t in fakes] == ["fake-1", "fake-2"]
        assert all(t.value == 0 and t.color is None for t in fakes)

    def test_tile_ids(self):
        assert numbered_tile_id(TileColor.RED, 7, 2) == "red-7-2"
        assert fake_joker_id(1) == "fake-1"

    def test_numbered_tile_requires_color(self):
        with pytest.raises(ValidationError):
            Tile(id="x", value=5)

    def test_fake_joker_rejects_value(self):
        with pytest.raises(ValidationError):
            Tile(id="fake-1", value=3, is_fake_joker=True)

    def test_tiles_are_frozen(self):
        t = tile(TileColor.BLUE, 3)
        with pytest.raises(ValidationError):
            t.value = 4

    def test_find_tile(self):
        hand = (tile(TileColor.RED, 1), tile(TileColor.RED, 2))
        assert find_tile(hand, "red-2-1") == 1
        assert find_tile(hand, "red-3-1") is None

    def test_joker_identity_does_not_match_fake_joker(self):
        joker = JokerIdentity(value=9, color=TileColor.BLACK)
        assert joker.matches(tile(TileColor.BLACK, 9, 2))
        assert not joker.matches(tile(TileColor.RED, 9))
        assert not joker.matches(fake())


class TestDeal:
    def test_shuffle_is_deterministic_with_seeded_rng(self):
        first = [t.id for t in create_deck(random.Random(3))]
        second = [t.id for t in create_deck(random.Random(3))]
        assert first == second
        assert sorted(first) == sorted(t.id for t in create_tile_set())

    def test_hand_and_pile_sizes(self):
        deal = distribute(create_deck(random.Random(1)), random.Random(1))
        assert [len(h) for h in deal.hands] == [DEALER_HAND_SIZE] + [HAND_SIZE] * (NUM_SEATS - 1)
        assert len(deal.draw_pile) == DRAW_PILE_SIZE == 48

    def test_deal_conserves_every_tile(self):
        deal = distribute(create_deck(random.Random(2)), random.Random(2))
        ids = [t.id for h in deal.hands for t in h] + [t.id for t in deal.draw_pile] + [deal.indicator.id]
        assert sorted(ids) == sorted(t.id for t in create_tile_set())

    def test_dealer_takes_tiles_from_end_of_deck(self):
        deck = create_tile_set()
        expected = [t.id for t in reversed(deck[-DEALER_HAND_SIZE:])]
        deal = distribute(deck, random.Random(0))
        assert [t.id for t in deal.hands[0]] == expected

    def test_indicator_is_never_a_fake_joker(self):
        for seed in range(50):
            deal = distribute(create_deck(random.Random(seed)), random.Random(seed))
            assert not deal.indicator.is_fake_joker
            assert deal.indicator.id not in {t.id for t in deal.draw_pile}

    def test_short_deck_rejected(self):
        with pytest.raises(ValueError, match="full deck"):
            distribute(create_tile_set()[:-1])

    def test_duplicate_tiles_rejected(self):
        deck = create_tile_set()
        deck[0] = deck[1]
        with pytest.raises(ValueError, match="full deck"):
            distribute(deck)


class TestResolveJoker:
    def test_joker_is_one_above_indicator(self):
        joker = resolve_joker(tile(TileColor.BLACK, 8))
        assert joker == JokerIdentity(value=9, color=TileColor.BLACK)

    def test_thirteen_wraps_to_one(self):
        joker = resolve_joker(tile(TileColor.ORANGE, 13))
        assert joker == JokerIdentity(value=1, color=TileColor.ORANGE)

    def test_fake_indicator_falls_back(self):
        assert resolve_joker(fake(2)) == FAKE_INDICATOR_FALLBACK
