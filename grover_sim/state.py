# grover_sim/state.py
import numpy as np
from dataclasses import dataclass
from .errors import NormalizationError

def default_tol(dtype) -> float:
    """Relative tolerance on total probability for a given amplitude dtype."""
    return 1e-5 if np.dtype(dtype) == np.complex64 else 1e-9

@dataclass
class AmplitudeState:
    n: int
    psi: np.ndarray  # shape (2**n,), dtype complex64/128

    @staticmethod
    def uniform(n: int, dtype=np.complex128) -> "AmplitudeState":
        N = 1 << n
        psi = np.full(N, 1.0 / np.sqrt(N), dtype=dtype)
        return AmplitudeState(n=n, psi=psi)

    @property
    def size(self) -> int:
        return self.psi.shape[0]

    @property
    def dtype(self):
        return self.psi.dtype

    def norm2(self) -> float:
        return float(np.vdot(self.psi, self.psi).real)

    def check_normalized(self, tol=None):
        if tol is None:
            tol = default_tol(self.dtype)
        n2 = self.norm2()
        if not (abs(1.0 - n2) <= tol):
            raise NormalizationError(f"Normalization failed: ||psi||^2={n2!r} (tol={tol})")

    def probabilities(self) -> np.ndarray:
        # re^2 + im^2, always float64 so callers can sum without precision loss
        re = self.psi.real.astype(np.float64)
        im = self.psi.imag.astype(np.float64)
        return re * re + im * im

    def copy(self) -> "AmplitudeState":
        return AmplitudeState(self.n, self.psi.copy())
