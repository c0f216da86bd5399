# grover_sim/apply_serial.py
import numpy as np
from .state import AmplitudeState

def apply_oracle(state: AmplitudeState, marked: int):
    """Phase flip: negate the amplitude at `marked`, leave every other entry alone."""
    psi = state.psi
    if not 0 <= marked < psi.shape[0]:
        raise IndexError(f"marked index {marked} out of range for N={psi.shape[0]}")
    psi[marked] = -psi[marked]

def apply_diffusion(state: AmplitudeState):
    """Inversion about the mean, in place.

    The mean is taken over the whole vector before any entry is written;
    real and imaginary parts are averaged separately.
    """
    psi = state.psi
    N = psi.shape[0]
    sum_re = 0.0
    sum_im = 0.0
    for i in range(N):
        a = psi[i]
        sum_re += float(a.real)
        sum_im += float(a.imag)
    mean_re = sum_re / N
    mean_im = sum_im / N
    for i in range(N):
        a = psi[i]
        psi[i] = complex(2.0*mean_re - float(a.real), 2.0*mean_im - float(a.imag))

def apply_dense(state: AmplitudeState, U: np.ndarray):
    """Apply an explicit N x N operator (used by the dense backend)."""
    assert U.shape == (state.size, state.size)
    state.psi[:] = U.astype(state.dtype) @ state.psi
