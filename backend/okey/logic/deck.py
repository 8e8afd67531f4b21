"""
Deck construction, dealing, and joker resolution.

Dealing consumes the shuffled deck from its end: 15 tiles to the dealer
(seat 0), then 14 to each other seat. One of the remaining tiles is then
picked at random as the indicator and removed from the draw pile, which
leaves 48 tiles to draw from.
"""

import random
import secrets

from pydantic import BaseModel, ConfigDict

from okey.logic.enums import TileColor
from okey.logic.tiles import MAX_VALUE, MIN_VALUE, TOTAL_TILES, JokerIdentity, Tile, create_tile_set

NUM_SEATS = 4
HAND_SIZE = 14
DEALER_HAND_SIZE = HAND_SIZE + 1
DEALER_SEAT = 0
DRAW_PILE_SIZE = TOTAL_TILES - DEALER_HAND_SIZE - HAND_SIZE * (NUM_SEATS - 1) - 1  # 48

# A fake-joker indicator has no value to count up from. distribute() never
# picks one, so this only applies to hand-built rooms.
FAKE_INDICATOR_FALLBACK = JokerIdentity(value=MIN_VALUE, color=TileColor.RED)


class Deal(BaseModel):
    """Result of dealing a shuffled deck."""

    model_config = ConfigDict(frozen=True)

    hands: tuple[tuple[Tile, ...], ...]
    draw_pile: tuple[Tile, ...]
    indicator: Tile


def _default_rng() -> random.Random:
    return secrets.SystemRandom()


def create_deck(rng: random.Random | None = None) -> list[Tile]:
    """Return all 106 tiles shuffled uniformly at random."""
    deck = create_tile_set()
    (rng or _default_rng()).shuffle(deck)
    return deck


def distribute(deck: list[Tile], rng: random.Random | None = None) -> Deal:
    """
    Deal hands from the end of the deck and reveal an indicator.

    The deck list is consumed in place. Raises ValueError when the deck
    is not a full 106-tile set.
    """
    if len(deck) != TOTAL_TILES or len({t.id for t in deck}) != TOTAL_TILES:
        raise ValueError(f"expected a full deck of {TOTAL_TILES} distinct tiles, got {len(deck)}")
    rng = rng or _default_rng()

    hands: list[list[Tile]] = [[] for _ in range(NUM_SEATS)]
    for seat in range(NUM_SEATS):
        size = DEALER_HAND_SIZE if seat == DEALER_SEAT else HAND_SIZE
        for _ in range(size):
            hands[seat].append(deck.pop())

    candidates = [index for index, tile in enumerate(deck) if not tile.is_fake_joker]
    indicator = deck.pop(rng.choice(candidates))

    dealt = sum(len(h) for h in hands) + 1 + len(deck)
    if dealt != TOTAL_TILES:  # pragma: no cover
        raise ValueError(f"deal lost tiles: {dealt} != {TOTAL_TILES}")

    return Deal(
        hands=tuple(tuple(h) for h in hands),
        draw_pile=tuple(deck),
        indicator=indicator,
    )


def resolve_joker(indicator: Tile) -> JokerIdentity:
    """
    Return the joker identity for an indicator tile.

    The joker is the same color as the indicator and one value higher,
    wrapping 13 to 1.
    """
    if indicator.is_fake_joker or indicator.color is None:
        return FAKE_INDICATOR_FALLBACK
    value = MIN_VALUE if indicator.value == MAX_VALUE else indicator.value + 1
    return JokerIdentity(value=value, color=indicator.color)
