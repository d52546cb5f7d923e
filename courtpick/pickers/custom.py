from typing import Sequence

from ..errors import InvalidSelection, MIN_PLAYERS
from ..players import Player
from .random import Foursome


def custom_pick(players: Sequence[Player], player_ids: Sequence[str]) -> Foursome:
    """Validate a hand-picked selection of 4 players and return them in the given order (team A first)."""
    if len(player_ids) != MIN_PLAYERS:
        raise InvalidSelection(f"select exactly {MIN_PLAYERS} players, got {len(player_ids)}")
    if len(set(player_ids)) != len(player_ids):
        raise InvalidSelection("a player cannot be selected twice")

    by_id = {p.id: p for p in players}
    missing = [pid for pid in player_ids if pid not in by_id]
    if missing:
        raise InvalidSelection(f"unknown players: {', '.join(missing)}")
    selected = [by_id[pid] for pid in player_ids]
    inactive = [p.name for p in selected if not p.active]
    if inactive:
        raise InvalidSelection(f"players not available: {', '.join(inactive)}")

    a, b, c, d = selected
    return a, b, c, d
