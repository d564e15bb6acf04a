"""Core rules for Rock-Paper-Scissors rounds."""

from enum import Enum


class Move(Enum):
    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"


class Outcome(Enum):
    """Result of a round, always from the player's point of view."""
    WIN = "win"
    LOSE = "lose"
    TIE = "tie"


MOVES = (Move.ROCK, Move.PAPER, Move.SCISSORS)

# What each move beats
BEATS = {
    Move.ROCK: Move.SCISSORS,
    Move.SCISSORS: Move.PAPER,
    Move.PAPER: Move.ROCK,
}

# Pre-computed outcome table: (player, opponent) → outcome
_OUTCOME_TABLE = {
    (Move.ROCK, Move.ROCK): Outcome.TIE,
    (Move.ROCK, Move.PAPER): Outcome.LOSE,
    (Move.ROCK, Move.SCISSORS): Outcome.WIN,
    (Move.PAPER, Move.ROCK): Outcome.WIN,
    (Move.PAPER, Move.PAPER): Outcome.TIE,
    (Move.PAPER, Move.SCISSORS): Outcome.LOSE,
    (Move.SCISSORS, Move.ROCK): Outcome.LOSE,
    (Move.SCISSORS, Move.PAPER): Outcome.WIN,
    (Move.SCISSORS, Move.SCISSORS): Outcome.TIE,
}


class GameError(Exception):
    """Base class for errors surfaced to the presentation layer."""


class InvalidMoveError(GameError, ValueError):
    """Raised when a value is not one of rock, paper or scissors."""

    def __init__(self, value):
        self.value = value
        valid = ", ".join(m.value for m in MOVES)
        super().__init__(f"Invalid move: {value!r}. Valid moves are: {valid}")


class ManualPlayDisabledError(GameError):
    """Raised when a manual move is submitted while auto-play is running."""

    def __init__(self):
        super().__init__("Manual moves are disabled while auto-play is running")


def beats(move_a: Move, move_b: Move) -> bool:
    """Return True if move_a defeats move_b."""
    return BEATS[move_a] is move_b


def resolve(player: Move, opponent: Move) -> Outcome:
    """Return the outcome of a round for the player."""
    return _OUTCOME_TABLE[player, opponent]


def parse_move(value) -> Move:
    """Turn user input into a Move.

    Accepts Move members and strings (case-insensitive, surrounding
    whitespace ignored). Everything else raises InvalidMoveError.
    """
    if isinstance(value, Move):
        return value
    if not isinstance(value, str):
        raise InvalidMoveError(value)
    try:
        return Move(value.strip().lower())
    except ValueError:
        raise InvalidMoveError(value) from None


def random_move(rng) -> Move:
    """Draw a move uniformly at random from ``rng`` (a random.Random)."""
    return rng.choice(MOVES)
