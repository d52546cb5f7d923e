from .random import RandomPicker, random_pick, shuffled
from .smart import (
    SmartPicker, Matchup, smart_pick, score_matchup,
    GAME_VARIANCE_WEIGHT, PARTNER_REPEAT_WEIGHT, EXACT_REMATCH_PENALTY, MAX_CANDIDATES, ORDERED_CANDIDATES,
)
from .custom import custom_pick
