"""
Hand validation for finishing a game.

A winning hand is 14 tiles arranged by the player into contiguous sets,
separated by empty slots (None entries). Separators are trusted: the
arrangement is checked as submitted, no other partition is searched.

Each set must hold at least three tiles and be either a group (same value,
distinct colors, at most four tiles) or a run (same color, consecutive
values). Tiles matching the joker identity are wildcards. Fake jokers stand
in for the joker identity itself and are not wildcards.

Runs may use 1 as the low end (1-2-3) or as the high end after 13
(12-13-1), but never both (13-1-2 is rejected).
"""

from collections.abc import Sequence

from okey.logic.deck import HAND_SIZE
from okey.logic.enums import TileColor
from okey.logic.tiles import MAX_VALUE, MIN_VALUE, JokerIdentity, Tile

MIN_SET_SIZE = 3
MAX_GROUP_SIZE = len(TileColor)
HIGH_ONE = MAX_VALUE + 1  # value 1 placed after 13


def split_groups(arranged: Sequence[Tile | None]) -> list[list[Tile]]:
    """Split an arranged hand into the sets between separators, dropping empty ones."""
    groups: list[list[Tile]] = []
    current: list[Tile] = []
    for slot in arranged:
        if slot is None:
            if current:
                groups.append(current)
                current = []
        else:
            current.append(slot)
    if current:
        groups.append(current)
    return groups


def _resolve(tiles: Sequence[Tile], joker: JokerIdentity) -> tuple[int, list[tuple[int, TileColor]]]:
    """Return (wildcard count, effective (value, color) of the other tiles)."""
    wildcards = 0
    fixed: list[tuple[int, TileColor]] = []
    for tile in tiles:
        if joker.matches(tile):
            wildcards += 1
        elif tile.is_fake_joker or tile.color is None:
            fixed.append((joker.value, joker.color))
        else:
            fixed.append((tile.value, tile.color))
    return wildcards, fixed


def _can_be_group(size: int, fixed: list[tuple[int, TileColor]]) -> bool:
    if size > MAX_GROUP_SIZE:
        return False
    values = {value for value, _ in fixed}
    colors = [color for _, color in fixed]
    return len(values) == 1 and len(set(colors)) == len(colors)


def _fits_run(values: list[int], size: int, lo: int, hi: int) -> bool:
    """Check sorted distinct values can sit inside one window of `size` within [lo, hi]."""
    earliest_start = max(lo, values[-1] - size + 1)
    latest_start = min(values[0], hi - size + 1)
    return earliest_start <= latest_start


def _can_be_run(size: int, fixed: list[tuple[int, TileColor]]) -> bool:
    if len({color for _, color in fixed}) != 1:
        return False
    values = sorted(value for value, _ in fixed)
    if len(set(values)) != len(values):
        return False
    if _fits_run(values, size, MIN_VALUE, MAX_VALUE):
        return True
    if MIN_VALUE in values:
        wrapped = sorted(HIGH_ONE if v == MIN_VALUE else v for v in values)
        return _fits_run(wrapped, size, MIN_VALUE + 1, HIGH_ONE)
    return False


def is_valid_set(tiles: Sequence[Tile], joker: JokerIdentity) -> bool:
    """Check that a single set is a valid group or run."""
    if len(tiles) < MIN_SET_SIZE:
        return False
    _, fixed = _resolve(tiles, joker)
    if not fixed:
        return True
    return _can_be_group(len(tiles), fixed) or _can_be_run(len(tiles), fixed)


def is_valid_hand(arranged: Sequence[Tile | None], joker: JokerIdentity) -> bool:
    """Check that an arranged hand has 14 tiles and every set between separators is valid."""
    groups = split_groups(arranged)
    if sum(len(g) for g in groups) != HAND_SIZE:
        return False
    return all(is_valid_set(group, joker) for group in groups)
