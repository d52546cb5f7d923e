import numpy as np

from courtpick.games import GameRecord
from courtpick.history import (
    game_count_of, partner_count, opponent_count, exact_rematch_count, games_per_player, pair_counts,
)

games = [
    GameRecord(['a', 'b', 'c', 'd']),
    GameRecord(['a', 'c', 'b', 'd']),
    GameRecord(['d', 'c', 'b', 'a']),
    GameRecord(['a', 'b', 'e', 'f']),
]


def test_game_count_of():
    assert game_count_of('a', games) == 4
    assert game_count_of('c', games) == 3
    assert game_count_of('e', games) == 1
    assert game_count_of('x', games) == 0
    assert game_count_of('a', []) == 0


def test_partner_count():
    assert partner_count('a', 'b', games) == 3
    assert partner_count('b', 'a', games) == 3
    assert partner_count('c', 'd', games) == 2
    assert partner_count('a', 'c', games) == 1
    assert partner_count('a', 'e', games) == 0
    assert partner_count('a', 'a', games) == 0


def test_partner_count_same_game():
    assert partner_count('a', 'b', games, same_team=False) == 4
    assert partner_count('a', 'c', games, same_team=False) == 3
    assert partner_count('e', 'f', games, same_team=False) == 1
    assert partner_count('c', 'e', games, same_team=False) == 0


def test_opponent_count():
    assert opponent_count('a', 'c', games) == 2
    assert opponent_count('a', 'b', games) == 1
    assert opponent_count('a', 'e', games) == 1
    assert opponent_count('e', 'f', games) == 0
    # every pair in a game is either partnered or opposed
    for x, y in [('a', 'b'), ('a', 'c'), ('b', 'd'), ('a', 'f')]:
        together = partner_count(x, y, games, same_team=False)
        assert together == partner_count(x, y, games) + opponent_count(x, y, games)


def test_exact_rematch_count():
    assert exact_rematch_count(['a', 'b'], ['c', 'd'], games) == 2
    assert exact_rematch_count(['d', 'c'], ['b', 'a'], games) == 2
    assert exact_rematch_count(['a', 'c'], ['b', 'd'], games) == 1
    assert exact_rematch_count(['a', 'd'], ['b', 'c'], games) == 0
    assert exact_rematch_count(['e', 'f'], ['a', 'b'], games) == 1


def test_games_per_player():
    ids = ['a', 'b', 'c', 'd', 'e', 'f', 'x']
    counts = games_per_player(ids, games)
    assert counts.tolist() == [4, 4, 3, 3, 1, 1, 0]
    assert counts.sum() == 4 * len(games)
    assert [game_count_of(pid, games) for pid in ids] == counts.tolist()


def test_pair_counts():
    ids = ['a', 'b', 'c', 'd', 'e', 'f']
    for same_team in [True, False]:
        cnt = pair_counts(ids, games, same_team=same_team)
        assert np.all(cnt == cnt.T)
        assert np.all(np.diag(cnt) == 0)
        for i, x in enumerate(ids):
            for k, y in enumerate(ids):
                if i != k:
                    assert cnt[i, k] == partner_count(x, y, games, same_team=same_team)

    # each game has 2 partnerships (4 entries) or 6 pairs (12 entries)
    assert pair_counts(ids, games).sum() == 4 * len(games)
    assert pair_counts(ids, games, same_team=False).sum() == 12 * len(games)
    # ignores unknown players
    assert pair_counts(['a', 'b'], games).tolist() == [[0, 3], [3, 0]]
