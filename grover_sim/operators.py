# grover_sim/operators.py
import math
import numpy as np

def optimal_iterations(N: int) -> int:
    """k* = max(1, round(pi/4 * sqrt(N)))."""
    return max(1, int(round(math.pi / 4.0 * math.sqrt(N))))

def oracle(N: int, marked: int, dtype=np.complex128) -> np.ndarray:
    # I - 2|m><m|
    mat = np.eye(N, dtype=dtype)
    mat[marked, marked] = -1
    return mat

def diffusion(N: int, dtype=np.complex128) -> np.ndarray:
    # 2|s><s| - I, with |s> the uniform superposition
    mat = np.full((N, N), 2.0 / N, dtype=dtype)
    mat -= np.eye(N, dtype=dtype)
    return mat

def grover_iterate(N: int, marked: int, dtype=np.complex128) -> np.ndarray:
    """One Grover iteration D @ O as a single matrix."""
    return diffusion(N, dtype=dtype) @ oracle(N, marked, dtype=dtype)

def is_unitary(U: np.ndarray, tol: float = 1e-10) -> bool:
    if U.ndim != 2 or U.shape[0] != U.shape[1]:
        return False
    return np.allclose(U.conj().T @ U, np.eye(U.shape[0]), atol=tol, rtol=0)
