from datetime import datetime, timezone
from attrs import define, field, frozen, validators

from .players import new_id, name_validators, strip_name

GAME_SIZE = 4


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_ids(ids) -> tuple[str, ...]:
    return tuple(str(i) for i in ids)


def _four_distinct(instance, attribute, value: tuple[str, ...]):
    if len(value) != GAME_SIZE:
        raise ValueError(f"{attribute.name} must hold exactly {GAME_SIZE} player ids, got {len(value)}")
    if len(set(value)) != GAME_SIZE:
        raise ValueError(f"{attribute.name} must hold distinct player ids, got {value}")


@frozen
class GameRecord:
    """A confirmed game. The first two players form team A, the last two team B.

    Game records are immutable: they can only be deleted from the history, never edited.
    """
    players: tuple[str, str, str, str] = field(converter=_as_ids, validator=_four_distinct)
    confirmed_at: datetime = field(factory=utc_now)
    id: str = field(factory=new_id)

    @property
    def team_a(self) -> tuple[str, str]:
        return self.players[0], self.players[1]

    @property
    def team_b(self) -> tuple[str, str]:
        return self.players[2], self.players[3]

    def __contains__(self, player_id: str) -> bool:
        return player_id in self.players


def _optional_ids(ids):
    return None if ids is None else _as_ids(ids)


def _free_or_four(instance, attribute, value):
    if value is not None:
        _four_distinct(instance, attribute, value)


@define
class Court:
    """A physical court. While a game is running on it, `player_ids` holds the 4 players, otherwise it is None."""
    name: str = field(converter=strip_name, validator=name_validators)
    player_ids: tuple[str, str, str, str] | None = field(default=None, converter=_optional_ids,
                                                          validator=_free_or_four)
    game_started_at: datetime | None = None
    id: str = field(factory=new_id)

    @property
    def is_free(self) -> bool:
        return self.player_ids is None
