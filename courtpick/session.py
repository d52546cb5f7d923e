import logging
from enum import Enum
from typing import Callable, Sequence

from .errors import NoProposalError
from .games import GameRecord
from .pickers import RandomPicker, SmartPicker, Matchup, custom_pick
from .players import Player
from .registry import Registry, PLAYER_REMOVED, STATUS_CHANGED, PIN_CHANGED, PLAYERS_RESET

logger = logging.getLogger(__name__)

Picker = Callable[[Sequence[Player], Sequence], Matchup | tuple[Player, Player, Player, Player]]

# mutations of the pool after which a proposal may reference players that are no longer eligible
INVALIDATING_EVENTS = frozenset({PLAYER_REMOVED, STATUS_CHANGED, PIN_CHANGED, PLAYERS_RESET})


class PickState(str, Enum):
    IDLE = 'idle'
    PROPOSED = 'proposed'


class PickSession:
    """The pick, confirm or reject flow of the organizer on top of a registry.

    `pick()` runs the picker and holds the result as a proposal. The proposal is either confirmed (the game is appended to
    the registry), rejected (the picker runs again) or cancelled. Removing a player, or changing anybody's status or
    pin, discards the proposal.
    """

    def __init__(self, registry: Registry, picker: Picker | str = 'smart'):
        self.registry = registry
        if picker == 'smart':
            picker = SmartPicker.from_settings()
        elif picker == 'random':
            picker = RandomPicker()
        elif isinstance(picker, str):
            raise ValueError(f"unknown picker '{picker}'")
        self.picker: Picker = picker
        self._proposal: tuple[Player, Player, Player, Player] | None = None
        self._unsubscribe = registry.subscribe(self._on_change)

    @property
    def state(self) -> PickState:
        return PickState.IDLE if self._proposal is None else PickState.PROPOSED

    @property
    def proposal(self) -> tuple[Player, Player, Player, Player] | None:
        """The proposed players, team A first, or None if there is no proposal."""
        return self._proposal

    def pick(self) -> tuple[Player, Player, Player, Player]:
        """Run the picker. A previous proposal is discarded, also if the picker raises."""
        self._proposal = None
        result = self.picker(self.registry.players, self.registry.games)
        self._proposal = result.players if isinstance(result, Matchup) else tuple(result)
        return self._proposal

    def propose(self, player_ids: Sequence[str]) -> tuple[Player, Player, Player, Player]:
        """Propose a hand-picked selection of players (team A first)."""
        self._proposal = custom_pick(self.registry.players, player_ids)
        return self._proposal

    def reject(self) -> tuple[Player, Player, Player, Player]:
        if self._proposal is None:
            raise NoProposalError("there is no proposal to reject")
        return self.pick()

    def cancel(self):
        self._proposal = None

    def confirm(self, court_id: str | None = None) -> GameRecord:
        """Record the proposed game and, if a court is given, start it on that court."""
        if self._proposal is None:
            raise NoProposalError("there is no proposal to confirm")
        player_ids = [p.id for p in self._proposal]
        if court_id is not None:
            # validates court and players before the game is recorded; the proposal stays if it fails
            self.registry.assign_court_game(court_id, player_ids)
        game = self.registry.append_game(player_ids)
        self._proposal = None
        return game

    def close(self):
        """Stop following the changes of the registry."""
        self._unsubscribe()

    def _on_change(self, event: str, details: dict):
        if self._proposal is not None and event in INVALIDATING_EVENTS:
            logger.debug("discarding the proposal after %s", event)
            self._proposal = None
