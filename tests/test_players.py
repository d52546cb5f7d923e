import pytest

from courtpick.players import Player, Status, Gender, SkillLevel, AgeGroup
from courtpick.games import GameRecord, Court


@pytest.mark.parametrize("name", ["A", "  Kim  ", "x" * 20])
def test_player_name(name: str):
    p = Player(name)
    assert p.name == name.strip()
    assert p.status is Status.ACTIVE
    assert not p.pinned
    assert p.active


@pytest.mark.parametrize("name", ["", "   ", "x" * 21])
def test_player_name_raises(name: str):
    with pytest.raises(ValueError):
        Player(name)


def test_player_ids_are_unique():
    ids = {Player("p").id for _ in range(100)}
    assert len(ids) == 100


def test_player_optional_attributes():
    p = Player("Lee", gender='female', skill_level='S', age_group='60s+')
    assert p.gender is Gender.FEMALE
    assert p.skill_level is SkillLevel.S
    assert p.age_group is AgeGroup.SIXTIES_PLUS

    p = Player("Park", gender='', skill_level=None)
    assert p.gender is None
    assert p.skill_level is None

    with pytest.raises(ValueError):
        Player("Choi", skill_level='F')


def test_only_active_players_can_be_pinned():
    with pytest.raises(ValueError):
        Player("Jung", status='resting', pinned=True)

    p = Player("Jung", status='resting')
    with pytest.raises(ValueError):
        p.pinned = True

    p = Player("Jung", pinned=True)
    assert p.pinned


def test_game_record():
    game = GameRecord(['a', 'b', 'c', 'd'])
    assert game.players == ('a', 'b', 'c', 'd')
    assert game.team_a == ('a', 'b')
    assert game.team_b == ('c', 'd')
    assert 'c' in game
    assert 'e' not in game
    assert game.confirmed_at.tzinfo is not None

    with pytest.raises(AttributeError):
        game.players = ('e', 'f', 'g', 'h')


@pytest.mark.parametrize("players", [['a', 'b', 'c'], ['a', 'b', 'c', 'd', 'e'], ['a', 'b', 'c', 'a']])
def test_game_record_raises(players: list[str]):
    with pytest.raises(ValueError):
        GameRecord(players)


def test_court():
    court = Court("Court 1")
    assert court.is_free
    court.player_ids = ['a', 'b', 'c', 'd']
    assert court.player_ids == ('a', 'b', 'c', 'd')
    assert not court.is_free

    with pytest.raises(ValueError):
        court.player_ids = ['a', 'b']
    with pytest.raises(ValueError):
        Court("")
