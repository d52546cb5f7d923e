"""Persistence of the registry state.

The state is stored as a single JSON document with camelCase keys, the way the browser store of the game manager
keeps it. Older documents store games as two teams (`teamA`, `teamB`) instead of the flat list of 4 `players`; these are
normalized when loading, so nothing after loading ever sees the old shape.
"""
import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Protocol
from attrs import define, field

from .errors import StorageError
from .games import GameRecord, Court
from .players import Player

logger = logging.getLogger(__name__)

FORMAT_VERSION = 2


@define
class Snapshot:
    players: list[Player] = field(factory=list)
    games: list[GameRecord] = field(factory=list)
    courts: list[Court] = field(factory=list)


class Repository(Protocol):

    def load(self) -> Snapshot:
        ...

    def save(self, snapshot: Snapshot) -> None:
        ...


class MemoryRepository:
    """Keeps the last saved snapshot in memory, mostly for tests."""

    def __init__(self, snapshot: Snapshot | None = None):
        self.snapshot = Snapshot() if snapshot is None else snapshot
        self.saves = 0

    def load(self) -> Snapshot:
        return Snapshot(list(self.snapshot.players), list(self.snapshot.games), list(self.snapshot.courts))

    def save(self, snapshot: Snapshot) -> None:
        self.snapshot = snapshot
        self.saves += 1


class JsonFileRepository:

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    def load(self) -> Snapshot:
        if not self.path.exists():
            logger.info("no data file at %s, starting empty", self.path)
            return Snapshot()
        try:
            document = json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"failed to read {self.path}: {e}") from e
        return decode_snapshot(document)

    def save(self, snapshot: Snapshot) -> None:
        tmp = self.path.with_name(self.path.name + '.tmp')
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(encode_snapshot(snapshot), ensure_ascii=False, indent=2), encoding='utf-8')
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageError(f"failed to write {self.path}: {e}") from e
        logger.debug("saved %d players and %d games to %s", len(snapshot.players), len(snapshot.games), self.path)


# encoding

def _time(dt: datetime | None) -> str | None:
    return None if dt is None else dt.isoformat()


def encode_player(player: Player) -> dict[str, Any]:
    return {
        'id': player.id,
        'name': player.name,
        'gender': None if player.gender is None else player.gender.value,
        'skillLevel': None if player.skill_level is None else player.skill_level.value,
        'ageGroup': None if player.age_group is None else player.age_group.value,
        'status': player.status.value,
        'pinned': player.pinned,
    }


def encode_game(game: GameRecord) -> dict[str, Any]:
    return {'id': game.id, 'players': list(game.players), 'confirmedAt': _time(game.confirmed_at)}


def encode_court(court: Court) -> dict[str, Any]:
    return {
        'id': court.id,
        'name': court.name,
        'playerIds': None if court.player_ids is None else list(court.player_ids),
        'gameStartedAt': _time(court.game_started_at),
    }


def encode_snapshot(snapshot: Snapshot) -> dict[str, Any]:
    return {
        'version': FORMAT_VERSION,
        'players': [encode_player(p) for p in snapshot.players],
        'games': [encode_game(g) for g in snapshot.games],
        'courts': [encode_court(c) for c in snapshot.courts],
    }


# decoding

def parse_time(value: str | None) -> datetime | None:
    if value is None:
        return None
    # browsers write a trailing 'Z' for UTC
    dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)


def decode_player(raw: dict[str, Any]) -> Player:
    status = raw.get('status', 'active')
    return Player(
        id=raw['id'],
        name=raw['name'],
        gender=raw.get('gender'),
        skill_level=raw.get('skillLevel'),
        age_group=raw.get('ageGroup'),
        status=status,
        # older stores kept the pin while a player was on court
        pinned=bool(raw.get('pinned')) and status == 'active',
    )


def _is_team_game(raw: dict[str, Any]) -> bool:
    return 'teamA' in raw and 'teamB' in raw and 'players' not in raw


def _is_flat_game(raw: dict[str, Any]) -> bool:
    return 'players' in raw


def _decode_team_game(raw: dict[str, Any]) -> GameRecord:
    team_a, team_b = raw['teamA'], raw['teamB']
    if len(team_a) != 2 or len(team_b) != 2:
        raise ValueError(f"teams must have 2 players each, got {team_a} and {team_b}")
    return GameRecord([*team_a, *team_b], confirmed_at=parse_time(raw['confirmedAt']), id=raw['id'])


def _decode_flat_game(raw: dict[str, Any]) -> GameRecord:
    return GameRecord(raw['players'], confirmed_at=parse_time(raw['confirmedAt']), id=raw['id'])


# (shape test, decoder) for every shape a game record was ever stored in, the current one first
GAME_SHAPES: list[tuple[Callable[[dict], bool], Callable[[dict], GameRecord]]] = [
    (_is_flat_game, _decode_flat_game),
    (_is_team_game, _decode_team_game),
]


def decode_game(raw: dict[str, Any]) -> GameRecord:
    for matches, decode in GAME_SHAPES:
        if matches(raw):
            return decode(raw)
    raise ValueError(f"unknown shape of game record: {sorted(raw)}")


def decode_court(raw: dict[str, Any]) -> Court:
    return Court(
        id=raw['id'],
        name=raw['name'],
        player_ids=raw.get('playerIds'),
        game_started_at=parse_time(raw.get('gameStartedAt')),
    )


def decode_snapshot(document: dict[str, Any]) -> Snapshot:
    if not isinstance(document, dict):
        raise StorageError(f"expected a JSON object, got {type(document).__name__}")
    version = document.get('version', 1)
    if not isinstance(version, int) or isinstance(version, bool):
        raise StorageError(f"format version must be an integer, got {version!r}")
    if version > FORMAT_VERSION:
        raise StorageError(f"unsupported format version {version}")
    try:
        players = [decode_player(raw) for raw in document.get('players', [])]
        games = [decode_game(raw) for raw in document.get('games', [])]
        courts = [decode_court(raw) for raw in document.get('courts', [])]
    except (KeyError, TypeError, ValueError) as e:
        raise StorageError(f"malformed document: {e!r}") from e

    n_legacy = sum(1 for raw in document.get('games', []) if _is_team_game(raw))
    if n_legacy:
        logger.warning("migrated %d game records from the team format", n_legacy)
    return Snapshot(players, games, courts)
