import logging
from typing import Sequence
import numpy as np
from attrs import frozen, field

from ..config import Settings, get_settings
from ..errors import InsufficientPlayers, MIN_PLAYERS
from ..games import GameRecord
from ..history import games_per_player, partner_count, exact_rematch_count
from ..players import Player
from .random import shuffled

logger = logging.getLogger(__name__)

# The weights are empirical. An exact rematch (100) should outweigh a moderate imbalance in games played, repeated
# partners are punished quadratically, and the game count variance is a softer pressure towards equal participation.
GAME_VARIANCE_WEIGHT: float = 10.0
PARTNER_REPEAT_WEIGHT: float = 50.0
EXACT_REMATCH_PENALTY: float = 100.0

MAX_CANDIDATES: int = 50
ORDERED_CANDIDATES: int = 10


@frozen
class Matchup:
    """Two teams of two for the next game, with the score they were chosen with (lower is better)."""
    team_a: tuple[Player, Player] = field(converter=tuple)
    team_b: tuple[Player, Player] = field(converter=tuple)
    score: float = field(default=0.0, eq=False)

    @property
    def players(self) -> tuple[Player, Player, Player, Player]:
        return self.team_a[0], self.team_a[1], self.team_b[0], self.team_b[1]

    @property
    def player_ids(self) -> tuple[str, str, str, str]:
        a, b, c, d = (p.id for p in self.players)
        return a, b, c, d


def score_matchup(
        team_a: Sequence[Player],
        team_b: Sequence[Player],
        games: Sequence[GameRecord],
        game_counts: dict[str, int] | None = None,
        game_variance_weight: float = GAME_VARIANCE_WEIGHT,
        partner_repeat_weight: float = PARTNER_REPEAT_WEIGHT,
        exact_rematch_penalty: float = EXACT_REMATCH_PENALTY,
        same_team: bool = True,
) -> float:
    """Score a proposed matchup against the history; the lower, the fairer.

    :param team_a:                  The two players of team A.
    :param team_b:                  The two players of team B.
    :param games:                   The history of confirmed games.
    :param game_counts:             Precomputed number of games per player id. Computed from `games`, if not given.
    :param game_variance_weight:    Weight of the sum of squared deviations of the 4 players' game counts from their
                                    mean. This is over all four players, not per team.
    :param partner_repeat_weight:   Weight of the squared number of times the two players of a team have been partners
                                    before. Applied to both teams.
    :param exact_rematch_penalty:   Flat penalty if exactly this matchup (in any side assignment) has been played before.
    :param same_team:               Count partners as "same team" (True) or "same game" (False).

    :return: The score, a non-negative number.
    """
    ids = [p.id for p in (*team_a, *team_b)]
    if game_counts is None:
        counts = games_per_player(ids, games)
    else:
        counts = np.array([game_counts.get(pid, 0) for pid in ids])

    score = game_variance_weight * float(np.sum((counts - counts.mean())**2))

    for p1, p2 in (team_a, team_b):
        score += partner_repeat_weight * partner_count(p1.id, p2.id, games, same_team=same_team)**2

    if exact_rematch_count(ids[:2], ids[2:], games) > 0:
        score += exact_rematch_penalty

    return score


class SmartPicker:

    def __init__(
            self,
            game_variance_weight: float = GAME_VARIANCE_WEIGHT,
            partner_repeat_weight: float = PARTNER_REPEAT_WEIGHT,
            exact_rematch_penalty: float = EXACT_REMATCH_PENALTY,
            max_candidates: int = MAX_CANDIDATES,
            ordered_candidates: int = ORDERED_CANDIDATES,
            same_team: bool = True,
            rng: np.random.Generator | None = None,
    ):
        """A picker that evaluates a number of random candidate matchups and returns the fairest one, i.e. the one
        with the lowest `score_matchup()`.

        Candidates are generated as follows: the active players are sorted by the number of games they played
        (ascending, stable). The first `ordered_candidates` candidates start from this order and take its first four
        players; from the second one on, the players behind these four are permuted at random first. All further
        candidates are drawn uniformly at random. Each candidate is split into team A (first two) and team B (last two).

        Note:
        This is a randomized local search with only a few samples (at most `max_candidates`), there is no guarantee
        to find the optimum.

        :param game_variance_weight:    See `score_matchup()`.
        :param partner_repeat_weight:   See `score_matchup()`.
        :param exact_rematch_penalty:   See `score_matchup()`.
        :param max_candidates:          The maximum number of candidates to evaluate. The actual number is the minimum
                                        of this and twice the number of active players.
        :param ordered_candidates:      How many of the candidates to derive from the order by games played.
        :param same_team:               See `score_matchup()`.
        :param rng:                     The random number generator to use.
        """
        if max_candidates < 1:
            raise ValueError("max_candidates must be positive")
        if ordered_candidates < 0:
            raise ValueError("ordered_candidates must not be negative")
        self.game_variance_weight = game_variance_weight
        self.partner_repeat_weight = partner_repeat_weight
        self.exact_rematch_penalty = exact_rematch_penalty
        self.max_candidates = max_candidates
        self.ordered_candidates = ordered_candidates
        self.same_team = same_team
        self.rng = np.random.default_rng() if rng is None else rng

    @classmethod
    def from_settings(cls, settings: Settings | None = None, rng: np.random.Generator | None = None) -> 'SmartPicker':
        """Create a picker with the weights and candidate counts of the given (or the global) settings."""
        if settings is None:
            settings = get_settings()
        return cls(
            game_variance_weight=settings.game_variance_weight,
            partner_repeat_weight=settings.partner_repeat_weight,
            exact_rematch_penalty=settings.exact_rematch_penalty,
            max_candidates=settings.max_candidates,
            ordered_candidates=settings.ordered_candidates,
            rng=rng,
        )

    def score(self, team_a: Sequence[Player], team_b: Sequence[Player], games: Sequence[GameRecord],
              game_counts: dict[str, int] | None = None) -> float:
        return score_matchup(
            team_a, team_b, games, game_counts,
            game_variance_weight=self.game_variance_weight,
            partner_repeat_weight=self.partner_repeat_weight,
            exact_rematch_penalty=self.exact_rematch_penalty,
            same_team=self.same_team,
        )

    def candidates(self, active: Sequence[Player], game_counts: dict[str, int]) -> list[list[Player]]:
        """Generate the candidate selections of 4 players (see the class documentation)."""
        by_games = sorted(active, key=lambda p: game_counts[p.id])
        n_candidates = min(self.max_candidates, 2 * len(active))

        selections = []
        for i in range(n_candidates):
            if i < self.ordered_candidates:
                # the core stays, only the tail is permuted
                order = by_games if i == 0 else by_games[:MIN_PLAYERS] + shuffled(by_games[MIN_PLAYERS:], self.rng)
            else:
                order = shuffled(active, self.rng)
            selections.append(order[:MIN_PLAYERS])
        return selections

    def __call__(self, players: Sequence[Player], games: Sequence[GameRecord]) -> Matchup:
        active = [p for p in players if p.active]
        if len(active) < MIN_PLAYERS:
            raise InsufficientPlayers(len(active))

        ids = [p.id for p in active]
        game_counts = dict(zip(ids, games_per_player(ids, games).tolist()))

        selections = self.candidates(active, game_counts)
        scores = np.array([self.score(s[:2], s[2:], games, game_counts) for s in selections])
        best = int(np.argmin(scores))  # first one wins ties

        a, b, c, d = selections[best]
        logger.debug("smart pick: best of %d candidates #%d with score %.1f", len(selections), best, scores[best])
        return Matchup((a, b), (c, d), score=float(scores[best]))


def smart_pick(players: Sequence[Player], games: Sequence[GameRecord],
               rng: np.random.Generator | None = None) -> Matchup:
    return SmartPicker(rng=rng)(players, games)
