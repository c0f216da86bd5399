# grover_sim/errors.py


class GroverSimError(Exception):
    """Base class for every error raised by grover_sim."""


class EngineStateError(GroverSimError, RuntimeError):
    """Operation needs an engine that has been initialized."""


class NormalizationError(GroverSimError, ArithmeticError):
    """Total probability drifted away from 1."""


class BackendError(GroverSimError, RuntimeError):
    """Unknown backend name, or the backend's library is missing."""


class SequencerError(GroverSimError, RuntimeError):
    """Level sequencer call made in the wrong phase."""
