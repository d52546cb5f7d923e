import logging
from typing import Callable, Sequence
import numpy as np
import pandas as pd
from attrs import evolve, fields_dict

from . import history
from .config import Settings, get_settings
from .errors import CourtError, UnknownPlayerError, UnknownGameError, UnknownCourtError
from .games import GameRecord, Court, utc_now
from .players import Player, Status
from .storage import Repository, Snapshot, JsonFileRepository

logger = logging.getLogger(__name__)

UNKNOWN_PLAYER = 'unknown'

Listener = Callable[[str, dict], None]

# events emitted to listeners
PLAYER_ADDED = 'player_added'
PLAYER_UPDATED = 'player_updated'
PLAYER_REMOVED = 'player_removed'
STATUS_CHANGED = 'status_changed'
PIN_CHANGED = 'pin_changed'
PLAYERS_RESET = 'players_reset'
GAME_ADDED = 'game_added'
GAME_REMOVED = 'game_removed'
GAMES_RESET = 'games_reset'
COURT_CHANGED = 'court_changed'


class Registry:
    """The player pool, the log of confirmed games and the courts of one organizer.

    The registry is the single owner of this state. If a repository is given, the state is loaded from it on
    construction and saved to it after every mutation. Listeners (see `subscribe()`) are notified about every mutation
    with the name of the event and a dict of details (e.g. the `player_id`).

    The query methods are derived from the game log on every call, see `courtpick.history`.
    """

    def __init__(self, repository: Repository | None = None):
        self.repository = repository
        self._listeners: list[Listener] = []

        snapshot = repository.load() if repository is not None else Snapshot()
        self._players: list[Player] = list(snapshot.players)
        self._games: list[GameRecord] = list(snapshot.games)
        self._courts: list[Court] = list(snapshot.courts)
        if repository is not None:
            logger.info("loaded %d players, %d games and %d courts", len(self._players), len(self._games),
                        len(self._courts))

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> 'Registry':
        """A registry stored in the `data_file` of the settings, or kept in memory only if there is none."""
        if settings is None:
            settings = get_settings()
        return cls(None if settings.data_file is None else JsonFileRepository(settings.data_file))

    @property
    def players(self) -> list[Player]:
        return list(self._players)

    @property
    def games(self) -> list[GameRecord]:
        return list(self._games)

    @property
    def courts(self) -> list[Court]:
        return list(self._courts)

    def active_players(self) -> list[Player]:
        return [p for p in self._players if p.active]

    def snapshot(self) -> Snapshot:
        return Snapshot(players=self.players, games=self.games, courts=self.courts)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for mutation events. Returns a function that unsubscribes it again."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _changed(self, event: str, **details):
        if self.repository is not None:
            self.repository.save(self.snapshot())
        for listener in list(self._listeners):
            listener(event, details)

    # players

    def get_player(self, player_id: str) -> Player:
        for player in self._players:
            if player.id == player_id:
                return player
        raise UnknownPlayerError(player_id)

    def player_name(self, player_id: str) -> str:
        """The name of the player, or 'unknown' for ids of removed players that are still referenced by games."""
        try:
            return self.get_player(player_id).name
        except UnknownPlayerError:
            return UNKNOWN_PLAYER

    def add_player(self, name: str, **attributes) -> Player:
        player = Player(name, **attributes)
        if any(p.id == player.id for p in self._players):
            raise ValueError(f"a player with id '{player.id}' already exists")
        self._players.append(player)
        logger.info("added player %s", player.name)
        self._changed(PLAYER_ADDED, player_id=player.id)
        return player

    def update_player(self, player_id: str, **updates) -> Player:
        """Edit the fields of a player. The id cannot be changed; use `set_status()` to change the status.

        All values are validated before the player is changed, so a failing update leaves the player as it was.
        """
        if 'id' in updates:
            raise ValueError("the id of a player cannot be changed")
        if 'status' in updates:
            raise ValueError("use set_status() to change the status of a player")
        player = self.get_player(player_id)
        pinned = updates.pop('pinned', None)
        unknown = [name for name in updates if name not in fields_dict(Player)]
        if unknown:
            raise AttributeError(f"players have no attribute '{unknown[0]}'")
        if pinned and not player.active:
            raise ValueError(f"{player.name} is {player.status.value}, only active players can be pinned")
        updated = evolve(player, **updates)

        for name in updates:
            setattr(player, name, getattr(updated, name))
        self._changed(PLAYER_UPDATED, player_id=player_id)
        if pinned is not None and bool(pinned) != player.pinned:
            self.toggle_pinned(player_id)
        return player

    def remove_player(self, player_id: str) -> Player:
        """Remove a player. Their games stay in the history. If they are on a court, that court keeps running."""
        player = self.get_player(player_id)
        self._players.remove(player)
        logger.info("removed player %s", player.name)
        self._changed(PLAYER_REMOVED, player_id=player_id)
        return player

    def set_status(self, player_id: str, status: Status | str) -> Player:
        player = self.get_player(player_id)
        status = Status(status)
        if status is player.status:
            return player
        if status is not Status.ACTIVE:
            player.pinned = False
        player.status = status
        logger.info("player %s is now %s", player.name, status.value)
        self._changed(STATUS_CHANGED, player_id=player_id, status=status)
        return player

    def toggle_status(self, player_id: str) -> Player:
        """Switch a player between active and resting. Players on a court have to wait for the court game to end."""
        player = self.get_player(player_id)
        if player.status is Status.PLAYING:
            raise CourtError(f"{player.name} is playing, end the court game first")
        return self.set_status(player_id, Status.RESTING if player.active else Status.ACTIVE)

    def toggle_pinned(self, player_id: str) -> Player:
        player = self.get_player(player_id)
        if not player.active:
            raise ValueError(f"{player.name} is {player.status.value}, only active players can be pinned")
        player.pinned = not player.pinned
        self._changed(PIN_CHANGED, player_id=player_id, pinned=player.pinned)
        return player

    def reset_player_states(self) -> list[Player]:
        """Make every resting player active again and unpin everyone. Returns the players that changed."""
        changed = [p for p in self._players if p.status is Status.RESTING or p.pinned]
        for player in changed:
            player.pinned = False
            if player.status is Status.RESTING:
                player.status = Status.ACTIVE
        if changed:
            self._changed(STATUS_CHANGED, player_ids=[p.id for p in changed])
        return changed

    def reset_players(self):
        """Remove all players, together with all games (and free all courts)."""
        self._players.clear()
        self._games.clear()
        for court in self._courts:
            court.player_ids = None
            court.game_started_at = None
        logger.info("removed all players and games")
        self._changed(PLAYERS_RESET)

    # games

    def get_game(self, game_id: str) -> GameRecord:
        for game in self._games:
            if game.id == game_id:
                return game
        raise UnknownGameError(game_id)

    def append_game(self, player_ids: Sequence[str]) -> GameRecord:
        """Record a confirmed game of 4 players (team A first, then team B)."""
        game = GameRecord(player_ids)
        unknown = [pid for pid in game.players if not any(p.id == pid for p in self._players)]
        if unknown:
            raise UnknownPlayerError(*unknown)
        self._games.append(game)
        logger.info("confirmed game %d: %s", len(self._games), ', '.join(self.player_name(pid) for pid in game.players))
        self._changed(GAME_ADDED, game_id=game.id)
        return game

    def remove_game(self, game_id: str) -> GameRecord:
        game = self.get_game(game_id)
        self._games.remove(game)
        self._changed(GAME_REMOVED, game_id=game_id)
        return game

    def reset_games(self):
        self._games.clear()
        self._changed(GAMES_RESET)

    def recent_games(self, limit: int | None = None) -> list[GameRecord]:
        """The last `limit` games (by default `recent_games_limit` of the settings), the most recent first."""
        if limit is None:
            limit = get_settings().recent_games_limit
        if limit < 0:
            raise ValueError(f"limit must not be negative, got {limit}")
        return self._games[::-1][:limit]

    # history queries

    def game_count_of(self, player_id: str) -> int:
        return history.game_count_of(player_id, self._games)

    def partner_count(self, id_a: str, id_b: str, same_team: bool = True) -> int:
        return history.partner_count(id_a, id_b, self._games, same_team=same_team)

    def opponent_count(self, id_a: str, id_b: str) -> int:
        return history.opponent_count(id_a, id_b, self._games)

    def exact_rematch_count(self, team_a: Sequence[str], team_b: Sequence[str]) -> int:
        return history.exact_rematch_count(team_a, team_b, self._games)

    def games_per_player(self) -> np.ndarray:
        """Number of games for each registered player, in the order of `players`."""
        return history.games_per_player([p.id for p in self._players], self._games)

    def pair_counts(self, same_team: bool = True) -> np.ndarray:
        """Partner counts between all registered players, in the order of `players`."""
        return history.pair_counts([p.id for p in self._players], self._games, same_team=same_team)

    def player_stats(self) -> pd.DataFrame:
        """A table of the registered players with their number of games, most games first."""
        df = pd.DataFrame({
            'id': [p.id for p in self._players],
            'name': [p.name for p in self._players],
            'status': [p.status.value for p in self._players],
            'pinned': [p.pinned for p in self._players],
            'games': self.games_per_player(),
        })
        return df.sort_values('games', ascending=False, kind='stable').reset_index(drop=True)

    def history_frame(self) -> pd.DataFrame:
        """The game log as a table, one row per game, numbered from 1 in the order they were confirmed."""
        columns = ['game', 'id', 'confirmed_at', 'team_a', 'team_b']
        rows = [
            (i + 1, game.id, game.confirmed_at,
             ' & '.join(self.player_name(pid) for pid in game.team_a),
             ' & '.join(self.player_name(pid) for pid in game.team_b))
            for i, game in enumerate(self._games)
        ]
        return pd.DataFrame(rows, columns=columns)

    # courts

    def get_court(self, court_id: str) -> Court:
        for court in self._courts:
            if court.id == court_id:
                return court
        raise UnknownCourtError(court_id)

    def add_court(self, name: str) -> Court:
        court = Court(name)
        self._courts.append(court)
        self._changed(COURT_CHANGED, court_id=court.id)
        return court

    def rename_court(self, court_id: str, name: str) -> Court:
        court = self.get_court(court_id)
        court.name = name
        self._changed(COURT_CHANGED, court_id=court_id)
        return court

    def remove_court(self, court_id: str) -> Court:
        """Remove a court. If a game is running on it, its players become active again."""
        court = self.get_court(court_id)
        if not court.is_free:
            self.end_court_game(court_id)
        self._courts.remove(court)
        self._changed(COURT_CHANGED, court_id=court_id)
        return court

    def assign_court_game(self, court_id: str, player_ids: Sequence[str]) -> Court:
        """Start a game of the 4 players on a free court. The players are `playing` (and unpinned) until it ends."""
        court = self.get_court(court_id)
        if not court.is_free:
            raise CourtError(f"court {court.name} is occupied")
        players = [self.get_player(pid) for pid in player_ids]
        unavailable = [p.name for p in players if not p.active]
        if unavailable:
            raise CourtError(f"players not available: {', '.join(unavailable)}")

        court.player_ids = tuple(player_ids)
        court.game_started_at = utc_now()
        for player in players:
            player.pinned = False
            player.status = Status.PLAYING
        logger.info("game started on court %s", court.name)
        self._changed(COURT_CHANGED, court_id=court_id)
        self._changed(STATUS_CHANGED, player_ids=list(court.player_ids))
        return court

    def end_court_game(self, court_id: str) -> Court:
        court = self.get_court(court_id)
        if court.is_free:
            raise CourtError(f"no game is running on court {court.name}")
        for pid in court.player_ids:
            try:
                player = self.get_player(pid)
            except UnknownPlayerError:
                logger.warning("player %s of court %s was removed during the game", pid, court.name)
                continue
            if player.status is Status.PLAYING:
                player.status = Status.ACTIVE
        player_ids = list(court.player_ids)
        court.player_ids = None
        court.game_started_at = None
        logger.info("game ended on court %s", court.name)
        self._changed(COURT_CHANGED, court_id=court_id)
        self._changed(STATUS_CHANGED, player_ids=player_ids)
        return court

    def reset_courts(self):
        for court in list(self._courts):
            if not court.is_free:
                self.end_court_game(court.id)
        self._courts.clear()
        self._changed(COURT_CHANGED)
