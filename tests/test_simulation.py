import pytest
import numpy as np

from courtpick.pickers import RandomPicker, SmartPicker
from courtpick.registry import Registry
from courtpick.simulation import hold_games
from courtpick.storage import MemoryRepository


def make_registry(n: int, **kwargs) -> Registry:
    registry = Registry(**kwargs)
    for i in range(n):
        registry.add_player(f"P{i + 1}")
    return registry


@pytest.mark.parametrize("n_players", [4, 7, 12])
def test_hold_games(n_players: int):
    registry = make_registry(n_players)
    rng = np.random.default_rng(n_players)
    for picker in [SmartPicker(rng=rng), RandomPicker(rng)]:
        registry.reset_games()
        games = hold_games(registry, picker, 30, pbar=False)
        assert registry.games == games
        assert len(games) == 30

        counts = registry.games_per_player()
        assert counts.sum() == 4 * 30
        pairs = registry.pair_counts()
        assert np.all(pairs == pairs.T)
        assert np.all(counts == pairs.sum(axis=1))


def test_smart_picker_is_fairer_than_random():
    registry = make_registry(10)
    spread = {}
    for name, picker in [('smart', SmartPicker(rng=np.random.default_rng(1))),
                         ('random', RandomPicker(np.random.default_rng(1)))]:
        registry.reset_games()
        hold_games(registry, picker, 100, pbar=False)
        spread[name] = np.std(registry.games_per_player())
    assert spread['smart'] < spread['random']


def test_hold_games_saves():
    repository = MemoryRepository()
    registry = make_registry(5, repository=repository)
    hold_games(registry, 'random', 3, pbar=False)
    assert len(repository.snapshot.games) == 3
    # the session of the simulation does not stay subscribed
    assert registry._listeners == []


def test_hold_no_games():
    registry = make_registry(2)
    assert hold_games(registry, 'smart', 0, pbar=False) == []
    with pytest.raises(ValueError):
        hold_games(registry, 'smart', -1, pbar=False)
