from enum import Enum
from uuid import uuid4
from attrs import define, field, validators

NAME_MAX_LENGTH = 20


class Gender(str, Enum):
    MALE = 'male'
    FEMALE = 'female'


class SkillLevel(str, Enum):
    """Skill tiers, from S (strongest) down to E."""
    S = 'S'
    A = 'A'
    B = 'B'
    C = 'C'
    D = 'D'
    E = 'E'


class AgeGroup(str, Enum):
    TEENS = '10s'
    TWENTIES = '20s'
    THIRTIES = '30s'
    FORTIES = '40s'
    FIFTIES = '50s'
    SIXTIES_PLUS = '60s+'


class Status(str, Enum):
    ACTIVE = 'active'
    RESTING = 'resting'
    PLAYING = 'playing'


def new_id() -> str:
    return str(uuid4())


def strip_name(name: str) -> str:
    return str(name).strip()


def _optional_enum(enum_cls):
    def convert(value):
        return None if value is None or value == '' else enum_cls(value)
    return convert


def _pin_requires_active(instance: 'Player', attribute, value: bool):
    if value and instance.status is not Status.ACTIVE:
        raise ValueError(f"only active players can be pinned, '{instance.name}' is {instance.status.value}")


name_validators = [validators.instance_of(str), validators.min_len(1), validators.max_len(NAME_MAX_LENGTH)]


@define
class Player:
    """A registered player of the pool.

    Only players with status `active` are eligible for the pickers. A pinned player is forced into the next random
    pick, which is why pinning is restricted to active players. Note that this is only validated when setting `pinned`
    (or on construction): use `Registry.set_status()` to change the status, which unpins as needed.
    """
    name: str = field(converter=strip_name, validator=name_validators)
    gender: Gender | None = field(default=None, converter=_optional_enum(Gender))
    skill_level: SkillLevel | None = field(default=None, converter=_optional_enum(SkillLevel))
    age_group: AgeGroup | None = field(default=None, converter=_optional_enum(AgeGroup))
    status: Status = field(default=Status.ACTIVE, converter=Status)
    pinned: bool = field(default=False, converter=bool, validator=_pin_requires_active)
    id: str = field(factory=new_id, validator=validators.instance_of(str))

    @property
    def active(self) -> bool:
        return self.status is Status.ACTIVE

    def __str__(self) -> str:
        return self.name
