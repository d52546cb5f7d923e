from collections import Counter
import pytest
import numpy as np
from scipy.stats import chisquare

from courtpick.errors import InsufficientPlayers, TooManyPinned
from courtpick.pickers import RandomPicker, random_pick
from courtpick.players import Player, Status


def make_players(n: int, pinned: int = 0, **status) -> list[Player]:
    players = [Player(f"P{i + 1}", pinned=i < pinned) for i in range(n)]
    for name, s in status.items():
        player = next(p for p in players if p.name == name)
        player.pinned = False
        player.status = s
    return players


def ids(players) -> set[str]:
    return {p.id for p in players}


@pytest.mark.parametrize("n, pinned", [(4, 0), (4, 4), (5, 1), (6, 3), (10, 0), (10, 4), (30, 2)])
def test_random_pick(n: int, pinned: int):
    players = make_players(n, pinned)
    picker = RandomPicker(np.random.default_rng(n))
    for _ in range(50):
        result = picker(players)
        assert isinstance(result, tuple)
        assert len(result) == 4
        assert len(ids(result)) == 4
        assert ids(p for p in players if p.pinned) <= ids(result)


def test_random_pick_exactly_four():
    players = make_players(4)
    for _ in range(20):
        assert ids(random_pick(players)) == ids(players)


def test_random_pick_never_picks_inactive():
    players = make_players(8, P2=Status.RESTING, P5=Status.PLAYING, P7=Status.RESTING)
    inactive = ids(p for p in players if not p.active)
    picker = RandomPicker(np.random.default_rng(1))
    for _ in range(100):
        assert not ids(picker(players)) & inactive


def test_four_pinned_always_picked():
    players = make_players(6, pinned=4)
    picker = RandomPicker(np.random.default_rng(2))
    for _ in range(100):
        assert ids(picker(players)) == ids(players[:4])


def test_pinned_slots_are_shuffled():
    players = make_players(8, pinned=1)
    picker = RandomPicker(np.random.default_rng(3))
    slots = Counter(next(i for i, p in enumerate(picker(players)) if p is players[0]) for _ in range(400))
    assert set(slots) == {0, 1, 2, 3}


def test_one_pinned_others_uniform():
    players = make_players(5, pinned=1)
    picker = RandomPicker(np.random.default_rng(4))
    n = 2000
    left_out = Counter()
    for _ in range(n):
        result = picker(players)
        assert players[0] in result
        left_out.update(p.name for p in players if p not in result)
    assert sum(left_out.values()) == n
    assert set(left_out) == {"P2", "P3", "P4", "P5"}
    assert chisquare([left_out[name] for name in sorted(left_out)]).pvalue > 1e-3


def test_random_pick_uniform():
    players = make_players(7)
    picker = RandomPicker(np.random.default_rng(5))
    counts = Counter(p.name for _ in range(1400) for p in picker(players))
    assert chisquare([counts[p.name] for p in players]).pvalue > 1e-3


@pytest.mark.parametrize("n", [0, 1, 3])
def test_insufficient_players(n: int):
    with pytest.raises(InsufficientPlayers):
        random_pick(make_players(n))


def test_insufficient_active_players():
    players = make_players(6, P1=Status.RESTING, P2=Status.RESTING, P3=Status.PLAYING)
    with pytest.raises(InsufficientPlayers) as e:
        random_pick(players)
    assert e.value.n_active == 3
    assert "at least 4 active players" in str(e.value)


def test_too_many_pinned():
    with pytest.raises(TooManyPinned) as e:
        random_pick(make_players(6, pinned=5))
    assert e.value.n_pinned == 5
    assert "unpin" in str(e.value)


def test_stale_pins_of_inactive_players_are_ignored():
    players = make_players(7, pinned=5)
    # pins that survived a status change, e.g. from old data
    players[3].status = Status.RESTING
    players[4].status = Status.RESTING
    picker = RandomPicker(np.random.default_rng(6))
    for _ in range(50):
        result = picker(players)
        assert ids(players[:3]) <= ids(result)
        assert not ids(result) & ids(players[3:5])
