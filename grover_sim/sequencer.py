# grover_sim/sequencer.py
"""Level sequencer: drives one AmplitudeEngine through a table of levels.

Per level the sequencer picks the hidden marked index, runs the first
oracle+diffusion round, hands out extra rounds as hints up to the level's
budget, and judges a guess by comparing it with the marked index.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from .engine import AmplitudeEngine, clamp_qubits
from .errors import SequencerError
from .operators import optimal_iterations

logger = logging.getLogger(__name__)

class Phase(Enum):
    IDLE = "idle"
    READY = "ready"
    AMPLIFIED = "amplified"
    WON = "won"
    FAILED = "failed"

@dataclass(frozen=True)
class Level:
    n_qubits: int
    iterations: Optional[int] = None  # budget; None -> k* for this size

    @property
    def budget(self) -> int:
        if self.iterations is not None:
            return max(1, int(self.iterations))
        return optimal_iterations(1 << clamp_qubits(self.n_qubits))

DEFAULT_LEVELS = (
    Level(2, 1),
    Level(3, 2),
    Level(4, 3),
    Level(5, 4),
    Level(6, 6),
    Level(7),
    Level(8),
)

class LevelSequencer:
    def __init__(self, engine: AmplitudeEngine, levels: Sequence[Level] = DEFAULT_LEVELS,
                 rng: Optional[np.random.Generator] = None):
        if not levels:
            raise ValueError("at least one level is required")
        self.engine = engine
        self.levels = tuple(levels)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.phase = Phase.IDLE
        self._index = 0
        self._used = 0

    @property
    def level_index(self) -> int:
        return self._index

    @property
    def level(self) -> Level:
        return self.levels[self._index]

    @property
    def hints_left(self) -> int:
        if self.phase is not Phase.AMPLIFIED:
            return 0
        return self.level.budget - self._used

    def start_level(self, index: Optional[int] = None, marked: Optional[int] = None) -> int:
        """Configure the engine for a level and return the marked index."""
        if index is not None:
            if not 0 <= index < len(self.levels):
                raise IndexError(f"level {index} out of range")
            self._index = index
        n = clamp_qubits(self.level.n_qubits)
        if marked is None:
            marked = int(self.rng.integers(0, 1 << n))
        self.engine.initialize(n, marked)
        self._used = 0
        self.phase = Phase.READY
        logger.debug("level %d: n=%d budget=%d", self._index, n, self.level.budget)
        return self.engine.marked

    def trigger_oracle(self) -> np.ndarray:
        self._expect(Phase.READY)
        probs = self.engine.advance()
        self._used = 1
        self.phase = Phase.AMPLIFIED
        return probs

    def request_hint(self) -> np.ndarray:
        self._expect(Phase.AMPLIFIED)
        if self.hints_left <= 0:
            raise SequencerError(f"iteration budget of {self.level.budget} exhausted")
        probs = self.engine.advance()
        self._used += 1
        return probs

    def submit_guess(self, index: int) -> bool:
        self._expect(Phase.AMPLIFIED)
        won = int(index) == self.engine.marked
        self.phase = Phase.WON if won else Phase.FAILED
        logger.debug("level %d guess %s -> %s", self._index, index, self.phase.value)
        return won

    def next_level(self) -> bool:
        """Advance to the next level after a win; False when the table is finished."""
        self._expect(Phase.WON)
        if self._index + 1 >= len(self.levels):
            return False
        self._index += 1
        self.phase = Phase.IDLE
        return True

    def _expect(self, phase: Phase):
        if self.phase is not phase:
            raise SequencerError(f"expected phase {phase.value}, currently {self.phase.value}")
