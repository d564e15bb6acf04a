from datetime import datetime

import pytest

from rps_duel.engine import Move


class ScriptedRng:
    """Stands in for random.Random: ``choice`` returns moves in order."""

    def __init__(self, *moves):
        self.moves = list(moves)

    def choice(self, seq):
        move = self.moves.pop(0)
        assert move in seq
        return move


class AlwaysRockRng:
    """Endless rng for auto-play tests: every draw is rock."""

    def choice(self, seq):
        return Move.ROCK


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2024, 1, 1, 12, 30, 45)
