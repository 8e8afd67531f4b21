"""
Matchmaker for seat assignment and bot filling.

Assigns human players to random seats and fills the remaining seats with
bot identities.
"""

import random
import secrets

from okey.logic.bot import bot_name, is_bot_identity, make_bot_identity
from okey.logic.deck import NUM_SEATS
from okey.logic.state import Player


def fill_seats(humans: list[Player], rng: random.Random | None = None) -> list[Player]:
    """
    Create the seat list for a new room.

    The sample ordering determines which seats get humans AND the order they
    are assigned in, so seat randomization works even when all four seats
    are human.
    """
    if not humans or len(humans) > NUM_SEATS:
        raise ValueError(f"Expected 1 to {NUM_SEATS} players, got {len(humans)}")
    ids = [p.id for p in humans]
    if len(ids) != len(set(ids)):
        raise ValueError("Player ids must be unique")
    if any(is_bot_identity(player_id) for player_id in ids):
        raise ValueError("Human player ids must not use the bot prefix")

    rng = rng or secrets.SystemRandom()
    human_seat_order = rng.sample(range(NUM_SEATS), len(humans))
    seat_to_player: dict[int, Player] = dict(zip(human_seat_order, humans, strict=True))

    seats: list[Player] = []
    bot_number = 1
    for seat in range(NUM_SEATS):
        if seat in seat_to_player:
            seats.append(seat_to_player[seat])
        else:
            seats.append(Player(id=make_bot_identity(), name=bot_name(bot_number)))
            bot_number += 1
    return seats
