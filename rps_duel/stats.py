"""Score and streak tracking, plus console formatting."""

from dataclasses import dataclass, replace
from typing import Optional

from .engine import Outcome


@dataclass
class Score:
    """Round tallies for one session."""
    wins: int = 0
    losses: int = 0
    ties: int = 0

    @property
    def total(self) -> int:
        return self.wins + self.losses + self.ties

    @property
    def win_rate(self) -> int:
        """Whole-number win percentage, halves rounded up; 0 before any round."""
        if not self.total:
            return 0
        return (self.wins * 200 + self.total) // (2 * self.total)

    def to_dict(self) -> dict:
        return {
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
            "total": self.total,
            "win_rate": self.win_rate,
        }


@dataclass
class Streak:
    """Consecutive wins or losses. Ties are skipped, not counted."""
    kind: Optional[Outcome] = None
    length: int = 0

    @property
    def is_notable(self) -> bool:
        """Streaks are only worth showing from two in a row."""
        return self.length >= 2

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value if self.kind else None,
            "length": self.length,
        }


class StatsAccumulator:
    """Mutable score and streak, updated once per resolved round."""

    def __init__(self):
        self._score = Score()
        self._streak = Streak()

    @property
    def score(self) -> Score:
        return replace(self._score)

    @property
    def streak(self) -> Streak:
        return replace(self._streak)

    def record(self, outcome: Outcome):
        if outcome is Outcome.WIN:
            self._score.wins += 1
        elif outcome is Outcome.LOSE:
            self._score.losses += 1
        else:
            self._score.ties += 1
            return

        if outcome is self._streak.kind:
            self._streak.length += 1
        else:
            self._streak = Streak(kind=outcome, length=1)

    def reset(self):
        self._score = Score()
        self._streak = Streak()


# ---------------------------------------------------------------------------
# Pretty-printing
# ---------------------------------------------------------------------------

OUTCOME_MESSAGES = {
    Outcome.WIN: "You Win! 🎉",
    Outcome.LOSE: "You Lose! 😔",
    Outcome.TIE: "It's a Tie! 🤝",
}

MOVE_EMOJIS = {
    "rock": "🪨",
    "paper": "📄",
    "scissors": "✂️",
}


def format_score(score: Score) -> str:
    return (f"Wins: {score.wins} | Losses: {score.losses} | Ties: {score.ties}"
            f"  (Win Rate: {score.win_rate}%, {score.total} games)")


def format_streak(streak: Streak) -> str:
    """Return the streak banner, or an empty string for short streaks."""
    if not streak.is_notable:
        return ""
    if streak.kind is Outcome.WIN:
        return f"🔥 {streak.length} Win Streak!"
    return f"💔 {streak.length} Losing Streak!"


def print_round(result):
    """Print the moves, outcome, score and streak of one RoundResult."""
    player = result.player_move.value
    opponent = result.opponent_move.value
    print(f"  You: {MOVE_EMOJIS[player]} {player:<9s} VS  "
          f"Computer: {MOVE_EMOJIS[opponent]} {opponent}")
    print(f"  {OUTCOME_MESSAGES[result.outcome]}")
    print(f"  {format_score(result.score)}")
    banner = format_streak(result.streak)
    if banner:
        print(f"  {banner}")


def print_history(records):
    """Print the history buffer, newest first."""
    print()
    if not records:
        print("  No games played yet")
        print()
        return
    print(f"  {'#':>4s}  {'Time':<8s}  {'You':<9s} {'Computer':<9s} {'Result':<6s}")
    print("  " + "-" * 44)
    for r in records:
        print(f"  {r.id:>4d}  {r.timestamp:%H:%M:%S}  {r.player_move.value:<9s} "
              f"{r.opponent_move.value:<9s} {r.outcome.value:<6s}")
    print()
