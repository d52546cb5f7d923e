from .errors import (
    PickError, InsufficientPlayers, TooManyPinned, InvalidSelection, NoProposalError, CourtError, StorageError,
    UnknownPlayerError, UnknownGameError, UnknownCourtError,
)
from .players import Player, Status, Gender, SkillLevel, AgeGroup
from .games import GameRecord, Court
from .registry import Registry
from .pickers import random_pick, smart_pick, custom_pick, RandomPicker, SmartPicker, Matchup, score_matchup
from .session import PickSession, PickState
from .storage import Repository, MemoryRepository, JsonFileRepository, Snapshot
from .simulation import hold_games
from .config import Settings, get_settings
