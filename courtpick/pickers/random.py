import logging
from typing import Sequence, TypeVar
import numpy as np

from ..errors import InsufficientPlayers, TooManyPinned, MIN_PLAYERS, MAX_PINNED
from ..games import GameRecord
from ..players import Player

logger = logging.getLogger(__name__)

T = TypeVar('T')
Foursome = tuple[Player, Player, Player, Player]


def shuffled(items: Sequence[T], rng: np.random.Generator) -> list[T]:
    """A uniformly shuffled copy of `items`."""
    return [items[i] for i in rng.permutation(len(items))]


class RandomPicker:
    """Pick 4 active players uniformly at random, but always include the pinned ones.

    The pinned players are put together with randomly chosen unpinned ones and the four are shuffled once more, such
    that the pinned players do not always end up in the first slots (UIs render the slots as teams, first two vs. last
    two).
    """

    def __init__(self, rng: np.random.Generator | None = None):
        self.rng = np.random.default_rng() if rng is None else rng

    def __call__(self, players: Sequence[Player], games: Sequence[GameRecord] = ()) -> Foursome:
        # the history is irrelevant here, the argument only exists to share the signature with the other pickers
        active = [p for p in players if p.active]
        if len(active) < MIN_PLAYERS:
            raise InsufficientPlayers(len(active))

        pinned = [p for p in active if p.pinned]
        unpinned = [p for p in active if not p.pinned]
        if len(pinned) > MAX_PINNED:
            raise TooManyPinned(len(pinned))

        needed = MIN_PLAYERS - len(pinned)
        selected = pinned + shuffled(unpinned, self.rng)[:needed]
        if len(selected) != MIN_PLAYERS:
            raise InsufficientPlayers(len(selected))

        a, b, c, d = shuffled(selected, self.rng)
        logger.debug("random pick (%d pinned): %s, %s, %s, %s", len(pinned), a, b, c, d)
        return a, b, c, d


def random_pick(players: Sequence[Player], rng: np.random.Generator | None = None) -> Foursome:
    return RandomPicker(rng)(players)
