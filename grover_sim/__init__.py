# grover_sim/__init__.py
from .errors import GroverSimError, EngineStateError, NormalizationError, BackendError, SequencerError
from .state import AmplitudeState
from .engine import AmplitudeEngine, EngineConfig
from .sequencer import Level, LevelSequencer, Phase

__version__ = "0.1.0"
