"""Game session: plays rounds, owns score/streak/history, runs auto-play."""

import itertools
import logging
import random
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .config import DEFAULT_AUTO_PLAY_MS, GameConfig
from .engine import (
    ManualPlayDisabledError,
    Move,
    Outcome,
    parse_move,
    random_move,
    resolve,
)
from .history import DEFAULT_HISTORY_SIZE, HistoryBuffer, RoundRecord
from .stats import Score, StatsAccumulator, Streak

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoundResult:
    """What one call to play_round hands back for rendering."""
    round_id: int
    player_move: Move
    opponent_move: Move
    outcome: Outcome
    score: Score
    streak: Streak

    def to_dict(self) -> dict:
        return {
            "round_id": self.round_id,
            "player_move": self.player_move.value,
            "opponent_move": self.opponent_move.value,
            "outcome": self.outcome.value,
            "score": self.score.to_dict(),
            "streak": self.streak.to_dict(),
        }


class AutoPlayer:
    """Two-state (Idle/Running) scheduler that calls ``tick`` periodically.

    The worker is a daemon thread waiting on an Event, so ``stop`` wakes it
    immediately. A tick that has already begun when ``stop`` is called is
    allowed to finish; ``stop`` waits for it unless called from the tick.
    """

    def __init__(self, tick: Callable[[], None]):
        self._tick = tick
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop: Optional[threading.Event] = None

    @property
    def running(self) -> bool:
        return self._thread is not None

    def start(self, period_ms: int):
        if period_ms <= 0:
            raise ValueError(f"auto-play period must be positive, got {period_ms}")
        with self._lock:
            if self._thread is not None:
                return
            stop = threading.Event()
            thread = threading.Thread(
                target=self._run,
                args=(stop, period_ms / 1000.0),
                name="rps-auto-play",
                daemon=True,
            )
            self._stop, self._thread = stop, thread
            thread.start()
        logger.info("auto-play started (every %d ms)", period_ms)

    def stop(self):
        with self._lock:
            thread, stop = self._thread, self._stop
            self._thread = self._stop = None
        if thread is None:
            return
        stop.set()
        if thread is not threading.current_thread():
            thread.join()
        logger.info("auto-play stopped")

    def _run(self, stop: threading.Event, period: float):
        while not stop.wait(period):
            try:
                self._tick()
            except Exception:
                logger.exception("auto-play tick failed, returning to idle")
                with self._lock:
                    if self._stop is stop:
                        self._thread = self._stop = None
                return


class GameSession:
    """Everything one player's game needs, with no module-level state.

    Args:
        rng: Source of the opponent's moves (anything with ``choice``).
             Defaults to a fresh ``random.Random()``.
        history_size: How many rounds the history keeps.
        auto_play_ms: Default period for ``start_auto_play``.
        clock: Zero-argument callable returning the round timestamp.
    """

    def __init__(
        self,
        rng=None,
        history_size: int = DEFAULT_HISTORY_SIZE,
        auto_play_ms: int = DEFAULT_AUTO_PLAY_MS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.rng = rng if rng is not None else random.Random()
        self.auto_play_ms = auto_play_ms
        self._clock = clock
        self._stats = StatsAccumulator()
        self._history = HistoryBuffer(history_size)
        self._ids = itertools.count(1)
        self._lock = threading.RLock()
        self._listeners: list = []
        self._auto = AutoPlayer(self._auto_tick)

    @classmethod
    def from_config(cls, config: GameConfig, rng=None) -> "GameSession":
        if rng is None:
            rng = random.Random(config.seed)
        return cls(
            rng=rng,
            history_size=config.history_size,
            auto_play_ms=config.auto_play_ms,
        )

    # -- state -------------------------------------------------------------

    @property
    def score(self) -> Score:
        return self._stats.score

    @property
    def streak(self) -> Streak:
        return self._stats.streak

    @property
    def history(self) -> tuple:
        return self._history.snapshot()

    @property
    def total_rounds(self) -> int:
        return self._stats.score.total

    @property
    def history_size(self) -> int:
        return self._history.capacity

    def to_dict(self) -> dict:
        score = self.score
        return {
            "score": score.to_dict(),
            "win_rate": score.win_rate,
            "total": score.total,
            "streak": self.streak.to_dict(),
            "history": [r.to_dict() for r in self.history],
            "auto_playing": self.is_auto_playing(),
        }

    # -- rounds ------------------------------------------------------------

    def play_round(self, player_move) -> RoundResult:
        """Play one manual round.

        Raises:
            InvalidMoveError: ``player_move`` is not rock, paper or scissors.
            ManualPlayDisabledError: auto-play is running.
        """
        return self._play(parse_move(player_move), manual=True)

    def play_random_round(self) -> RoundResult:
        """Play a manual round with a randomly chosen player move."""
        return self._play(None, manual=True)

    def _auto_tick(self):
        self._play(None, manual=False)

    def _play(self, move: Optional[Move], manual: bool) -> RoundResult:
        """Resolve one round; ``move=None`` draws the player's move too.

        The Running check and the round share the lock that
        ``start_auto_play`` takes, so no manual round lands while Running.
        """
        with self._lock:
            if manual and self._auto.running:
                raise ManualPlayDisabledError()
            if move is None:
                move = random_move(self.rng)
            opponent = random_move(self.rng)
            outcome = resolve(move, opponent)
            self._stats.record(outcome)
            record = RoundRecord(
                id=next(self._ids),
                player_move=move,
                opponent_move=opponent,
                outcome=outcome,
                timestamp=self._clock(),
            )
            self._history.push(record)
            result = RoundResult(
                round_id=record.id,
                player_move=move,
                opponent_move=opponent,
                outcome=outcome,
                score=self._stats.score,
                streak=self._stats.streak,
            )
        logger.debug("round %d: %s vs %s = %s", record.id,
                     move.value, opponent.value, outcome.value)
        for listener in list(self._listeners):
            listener(result)
        return result

    def reset(self):
        """Stop auto-play, then clear score, streak and history."""
        self._auto.stop()
        with self._lock:
            self._stats.reset()
            self._history.clear()
        logger.info("session reset")

    # -- listeners ---------------------------------------------------------

    def add_listener(self, callback: Callable[[RoundResult], None]):
        """Call ``callback(result)`` after every round, manual or automatic."""
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[RoundResult], None]):
        if callback in self._listeners:
            self._listeners.remove(callback)

    # -- auto-play ---------------------------------------------------------

    def start_auto_play(self, period_ms: Optional[int] = None):
        with self._lock:
            self._auto.start(period_ms if period_ms is not None else self.auto_play_ms)

    def stop_auto_play(self):
        self._auto.stop()

    def is_auto_playing(self) -> bool:
        return self._auto.running
