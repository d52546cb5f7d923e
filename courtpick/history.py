"""Queries over the game history.

Everything is derived from the sequence of game records on every call; nothing is cached. The history only grows by
appending and shrinks by explicit deletion, and is small (hundreds of games at most), so there is no need to.

Teams are positional: the first two players of a record are team A, the last two team B. Games picked as "4 free
agents" are stored the same way, so the same-team semantics apply to them once confirmed. Pass `same_team=False` to
`partner_count()` and `pair_counts()` to count any two players sharing a game instead.
"""
from typing import Iterable, Sequence
import numpy as np

from .games import GameRecord


def _teams(game: GameRecord) -> tuple[frozenset[str], frozenset[str]]:
    return frozenset(game.team_a), frozenset(game.team_b)


def game_count_of(player_id: str, games: Iterable[GameRecord]) -> int:
    """Number of games the player took part in."""
    return sum(1 for game in games if player_id in game.players)


def partner_count(id_a: str, id_b: str, games: Iterable[GameRecord], same_team: bool = True) -> int:
    """Number of games in which the two players were on the same team (or, with `same_team=False`, in the same
    game)."""
    if id_a == id_b:
        return 0
    pair = {id_a, id_b}
    if not same_team:
        return sum(1 for game in games if pair <= set(game.players))
    return sum(1 for game in games if any(pair <= team for team in _teams(game)))


def opponent_count(id_a: str, id_b: str, games: Iterable[GameRecord]) -> int:
    """Number of games in which the two players were on opposing teams."""
    count = 0
    for game in games:
        team_a, team_b = _teams(game)
        if (id_a in team_a and id_b in team_b) or (id_a in team_b and id_b in team_a):
            count += 1
    return count


def exact_rematch_count(team_a: Sequence[str], team_b: Sequence[str], games: Iterable[GameRecord]) -> int:
    """Number of games with exactly this partition into two teams, regardless of which side is labeled A or B."""
    matchup = {frozenset(team_a), frozenset(team_b)}
    return sum(1 for game in games if set(_teams(game)) == matchup)


def games_per_player(player_ids: Sequence[str], games: Iterable[GameRecord]) -> np.ndarray:
    """The number of games played, for each of the given players (in the same order)."""
    index = {pid: i for i, pid in enumerate(player_ids)}
    counts = np.zeros(len(player_ids), dtype=int)
    for game in games:
        for pid in game.players:
            if pid in index:
                counts[index[pid]] += 1
    return counts


def pair_counts(player_ids: Sequence[str], games: Iterable[GameRecord], same_team: bool = True) -> np.ndarray:
    """Symmetric matrix of how often each two of the given players were partners.

    With `same_team=False` all 6 pairs of a game count, otherwise only the two intra-team pairs. The diagonal is zero.
    Players not among `player_ids` are ignored.
    """
    index = {pid: i for i, pid in enumerate(player_ids)}
    counts = np.zeros((len(player_ids), len(player_ids)), dtype=int)
    for game in games:
        groups = _teams(game) if same_team else (frozenset(game.players),)
        for group in groups:
            members = [index[pid] for pid in group if pid in index]
            for i in members:
                for k in members:
                    if i != k:
                        counts[i, k] += 1
    return counts
