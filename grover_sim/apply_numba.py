# grover_sim/apply_numba.py
import logging
from numba import config, njit, prange, set_num_threads, get_num_threads
from .state import AmplitudeState

logger = logging.getLogger(__name__)

# ---------- low-level kernels (Numba JIT) ----------

@njit
def _oracle_kernel(psi, marked):
    psi[marked] = -psi[marked]

@njit(parallel=True, fastmath=True)
def _diffusion_kernel(psi):
    N = psi.shape[0]
    sum_re = 0.0
    sum_im = 0.0
    # full reduction first; nothing is written until both means are known
    for i in prange(N):
        sum_re += psi[i].real
        sum_im += psi[i].imag
    mean_re = sum_re / N
    mean_im = sum_im / N
    for i in prange(N):
        a = psi[i]
        psi[i] = complex(2.0*mean_re - a.real, 2.0*mean_im - a.imag)

# ---------- user-facing apply helpers ----------

def max_threads() -> int:
    return config.NUMBA_NUM_THREADS

def set_threads(n: int) -> int:
    """Set the process-wide numba thread count, clamped to [1, NUMBA_NUM_THREADS]."""
    pool = max_threads()
    tt = min(max(int(n), 1), pool)
    if tt != n:
        logger.warning("requested %s numba threads, pool=%d; using %d", n, pool, tt)
    set_num_threads(tt)
    return tt

def get_threads() -> int:
    return get_num_threads()

def apply_oracle(state: AmplitudeState, marked: int):
    if not 0 <= marked < state.size:
        raise IndexError(f"marked index {marked} out of range for N={state.size}")
    _oracle_kernel(state.psi, marked)

def apply_diffusion(state: AmplitudeState):
    _diffusion_kernel(state.psi)
