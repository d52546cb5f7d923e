MIN_PLAYERS = 4
MAX_PINNED = 4


class PickError(ValueError):
    """Base class of all errors raised while picking players for the next game."""


class InsufficientPlayers(PickError):

    def __init__(self, n_active: int, needed: int = MIN_PLAYERS):
        super().__init__(f"need at least {needed} active players (currently {n_active})")
        self.n_active = n_active
        self.needed = needed


class TooManyPinned(PickError):

    def __init__(self, n_pinned: int, limit: int = MAX_PINNED):
        super().__init__(f"unpin players until at most {limit} remain pinned (currently {n_pinned})")
        self.n_pinned = n_pinned
        self.limit = limit


class InvalidSelection(PickError):
    """A hand-picked selection is not a valid game (wrong size, duplicates or ineligible players)."""


class NoProposalError(PickError):
    """Confirming or rejecting while there is no proposal on the table."""


class CourtError(ValueError):
    pass


class StorageError(RuntimeError):
    pass


class UnknownPlayerError(KeyError):
    pass


class UnknownGameError(KeyError):
    pass


class UnknownCourtError(KeyError):
    pass
