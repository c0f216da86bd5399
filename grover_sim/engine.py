# grover_sim/engine.py
"""Amplitude engine for Grover's search over N = 2**n basis states.

The engine owns one amplitude vector and evolves it with a phase oracle
followed by a diffusion (inversion about the mean). Callers only ever see
copies: probability arrays, amplitude snapshots, and formatted labels.

Out-of-range configuration is clamped rather than rejected: ``n`` into
[1, 8] and the marked index into [0, N-1]. Clamping is logged as a warning.
"""
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

from .errors import BackendError, EngineStateError
from .operators import optimal_iterations
from .state import AmplitudeState

logger = logging.getLogger(__name__)

MIN_QUBITS = 1
MAX_QUBITS = 8

Listener = Callable[[int, np.ndarray], None]

def clamp_qubits(n: int) -> int:
    return min(max(int(n), MIN_QUBITS), MAX_QUBITS)

def clamp_marked(marked: int, n: int) -> int:
    return min(max(int(marked), 0), (1 << n) - 1)

def state_label(index: int, n: int) -> str:
    """n-bit binary label of `index`, most significant bit first."""
    if not 0 <= index < (1 << n):
        raise IndexError(f"index {index} out of range for {n} qubits")
    return format(index, f"0{n}b")

def max_probability_index(probs: np.ndarray) -> int:
    # np.argmax returns the first occurrence, so ties go to the lowest index
    if len(probs) == 0:
        raise ValueError("empty probability array")
    return int(np.argmax(probs))

@dataclass
class EngineConfig:
    backend: str = "serial"            # "serial", "numba" or "dense"
    dtype: type = np.complex128
    check_norm: bool = True
    norm_tol: Optional[float] = None   # None -> default for dtype
    # numba only; clamped to the pool size. set_num_threads is process-wide,
    # so this also changes the thread count of every other numba engine.
    num_threads: Optional[int] = None

def _load_backend(config: EngineConfig):
    """Return (apply_oracle, apply_diffusion) for the configured backend."""
    if config.backend == "serial":
        from .apply_serial import apply_oracle, apply_diffusion
        return apply_oracle, apply_diffusion

    if config.backend == "numba":
        try:
            from .apply_numba import apply_oracle, apply_diffusion, set_threads
        except ImportError as e:
            raise BackendError("Numba backend not available. Did you `pip install numba`?") from e
        if config.num_threads is not None:
            set_threads(int(config.num_threads))
        return apply_oracle, apply_diffusion

    if config.backend == "dense":
        from .apply_serial import apply_dense
        from . import operators as O

        def dense_oracle(state, marked):
            if not 0 <= marked < state.size:
                raise IndexError(f"marked index {marked} out of range for N={state.size}")
            apply_dense(state, O.oracle(state.size, marked, dtype=state.dtype))

        def dense_diffusion(state):
            apply_dense(state, O.diffusion(state.size, dtype=state.dtype))

        return dense_oracle, dense_diffusion

    raise BackendError(f"Unknown backend: {config.backend}")


class AmplitudeEngine:
    """Grover amplitude engine.

    Typical use::

        eng = AmplitudeEngine(3, marked=5)
        probs = eng.advance()
        eng.get_state_label(eng.get_max_probability_index())  # '101'
    """

    def __init__(self, n_qubits: Optional[int] = None, marked: Optional[int] = None,
                 config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self._oracle, self._diffusion = _load_backend(self.config)
        self._state: Optional[AmplitudeState] = None
        self._n: Optional[int] = None
        self._marked: Optional[int] = None
        self._iteration = 0
        self._listeners: List[Listener] = []
        if n_qubits is not None and marked is not None:
            self.initialize(n_qubits, marked)

    # ------------------------------------------------------------ config

    @property
    def is_initialized(self) -> bool:
        return self._state is not None

    @property
    def n_qubits(self) -> Optional[int]:
        return self._n

    @property
    def size(self) -> int:
        return 0 if self._n is None else 1 << self._n

    @property
    def marked(self) -> Optional[int]:
        return self._marked

    @property
    def iteration(self) -> int:
        return self._iteration

    @property
    def optimal_iterations(self) -> int:
        self._require_init()
        return optimal_iterations(self.size)

    def initialize(self, n_qubits: int, marked: int):
        n = clamp_qubits(n_qubits)
        m = clamp_marked(marked, n)
        if n != n_qubits or m != marked:
            logger.warning("clamped configuration n=%s marked=%s -> n=%d marked=%d",
                           n_qubits, marked, n, m)
        self._n = n
        self._marked = m
        self.reset()

    def reset(self):
        self._require_init(configured_only=True)
        self._state = AmplitudeState.uniform(self._n, dtype=self.config.dtype)
        self._iteration = 0
        logger.debug("reset: n=%d N=%d marked=%d k*=%d",
                     self._n, self.size, self._marked, optimal_iterations(self.size))
        self._check()

    # ---------------------------------------------------------- evolution

    def oracle_step(self):
        """Phase flip on the marked index only. Does not count an iteration."""
        self._require_init()
        self._oracle(self._state, self._marked)
        self._check()

    def diffusion_step(self):
        """Inversion about the mean only. Does not count an iteration."""
        self._require_init()
        self._diffusion(self._state)
        self._check()

    def advance(self) -> np.ndarray:
        """One Grover iteration (oracle then diffusion); returns probabilities."""
        self._require_init()
        self._oracle(self._state, self._marked)
        self._diffusion(self._state)
        self._check()
        self._iteration += 1
        probs = self._state.probabilities()
        for cb in list(self._listeners):
            cb(self._iteration, probs.copy())
        return probs

    def run_to_optimal(self) -> np.ndarray:
        self._require_init()
        self.reset()
        probs = self.get_probabilities()
        for _ in range(optimal_iterations(self.size)):
            probs = self.advance()
        return probs

    # ------------------------------------------------------------ queries

    def get_probabilities(self) -> np.ndarray:
        if self._state is None:
            return np.zeros(0, dtype=np.float64)
        return self._state.probabilities()

    def get_amplitudes(self) -> np.ndarray:
        self._require_init()
        return self._state.copy().psi

    def get_marked_probability(self) -> float:
        self._require_init()
        return float(self._state.probabilities()[self._marked])

    def get_max_probability_index(self) -> int:
        self._require_init()
        return max_probability_index(self._state.probabilities())

    def get_state_label(self, index: int) -> str:
        self._require_init()
        return state_label(index, self._n)

    def get_ket_label(self, index: int) -> str:
        return f"|{self.get_state_label(index)}⟩"

    # ---------------------------------------------------------- listeners

    def add_listener(self, callback: Listener):
        """Register callback(iteration, probabilities), fired after every advance()."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: Listener):
        self._listeners.remove(callback)

    # ----------------------------------------------------------- internal

    def _require_init(self, configured_only=False):
        ready = self._marked is not None if configured_only else self._state is not None
        if not ready:
            raise EngineStateError("engine not initialized; call initialize(n, marked) first")

    def _check(self):
        if self.config.check_norm:
            self._state.check_normalized(tol=self.config.norm_tol)

    def __repr__(self):
        if not self.is_initialized:
            return "AmplitudeEngine(uninitialized)"
        return (f"AmplitudeEngine(n={self._n}, marked={self._marked}, "
                f"iteration={self._iteration}, backend={self.config.backend!r})")
