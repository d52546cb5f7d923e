from tqdm import trange

from .games import GameRecord
from .registry import Registry
from .session import PickSession, Picker


def hold_games(registry: Registry, picker: Picker | str = 'smart', n_games: int = 1,
               pbar: bool = True) -> list[GameRecord]:
    """Pick and confirm `n_games` games in a row, as if the organizer accepted every proposal.

    This is meant for studying how fair a picker is over a whole evening, e.g. by looking at
    `registry.games_per_player()` and `registry.pair_counts()` afterwards. The games are appended to the registry (and
    saved, if it has a repository).

    :param registry:    The registry to pick from and to record the games in.
    :param picker:      The picker to use (as for `PickSession`).
    :param n_games:     The number of games to hold.
    :param pbar:        Whether to show a progress bar.
    :return:    The recorded games, in order.
    """
    if n_games < 0:
        raise ValueError("n_games must not be negative")
    session = PickSession(registry, picker)
    games = []
    try:
        for _ in trange(n_games, disable=not pbar, desc="games"):
            session.pick()
            games.append(session.confirm())
    finally:
        session.close()
    return games
