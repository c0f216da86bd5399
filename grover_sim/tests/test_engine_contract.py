# grover_sim/tests/test_engine_contract.py
import logging
import numpy as np
import pytest
from grover_sim.engine import AmplitudeEngine, EngineConfig, clamp_marked, clamp_qubits
from grover_sim.errors import BackendError, EngineStateError, GroverSimError, NormalizationError
from grover_sim.state import AmplitudeState

def test_uninitialized_engine_rejects_evolution():
    eng = AmplitudeEngine()
    assert not eng.is_initialized
    for op in (eng.advance, eng.run_to_optimal, eng.reset, eng.oracle_step,
               eng.diffusion_step, eng.get_marked_probability, eng.get_max_probability_index):
        with pytest.raises(EngineStateError):
            op()
    with pytest.raises(EngineStateError):
        eng.get_state_label(0)
    assert eng.iteration == 0
    assert eng.get_probabilities().shape == (0,)

def test_state_error_is_catchable_as_runtime_error():
    with pytest.raises(RuntimeError):
        AmplitudeEngine().advance()
    assert issubclass(EngineStateError, GroverSimError)

def test_clamp_helpers():
    assert clamp_qubits(0) == 1
    assert clamp_qubits(-3) == 1
    assert clamp_qubits(12) == 8
    assert clamp_qubits(5) == 5
    assert clamp_marked(-1, 3) == 0
    assert clamp_marked(99, 3) == 7
    assert clamp_marked(4, 3) == 4

def test_initialize_clamps_and_warns(caplog):
    eng = AmplitudeEngine()
    with caplog.at_level(logging.WARNING, logger="grover_sim.engine"):
        eng.initialize(20, 1000)
    assert (eng.n_qubits, eng.size, eng.marked) == (8, 256, 255)
    assert "clamped" in caplog.text

    eng.initialize(0, -5)
    assert (eng.n_qubits, eng.marked) == (1, 0)

def test_in_range_configuration_does_not_warn(caplog):
    with caplog.at_level(logging.WARNING, logger="grover_sim.engine"):
        AmplitudeEngine(3, 4)
    assert caplog.records == []

def test_probabilities_are_snapshots():
    eng = AmplitudeEngine(2, 1)
    probs = eng.get_probabilities()
    probs[:] = 0.0
    assert eng.get_probabilities().sum() == pytest.approx(1.0)
    amps = eng.get_amplitudes()
    amps[:] = 0.0
    assert eng.get_marked_probability() == pytest.approx(0.25)

def test_listeners_receive_each_iteration():
    eng = AmplitudeEngine(3, 2)
    seen = []
    cb = lambda it, probs: seen.append((it, probs[2]))
    eng.add_listener(cb)
    eng.add_listener(cb)  # registering twice is a no-op
    eng.advance()
    eng.advance()
    assert [it for it, _ in seen] == [1, 2]
    assert seen[0][1] == pytest.approx(0.78125)
    eng.remove_listener(cb)
    eng.advance()
    assert len(seen) == 2

def test_step_operations_do_not_count():
    eng = AmplitudeEngine(3, 1)
    eng.oracle_step()
    eng.diffusion_step()
    assert eng.iteration == 0

def test_unknown_backend():
    with pytest.raises(BackendError):
        AmplitudeEngine(2, 0, config=EngineConfig(backend="cupy"))

def test_normalization_check_raises():
    st = AmplitudeState(2, np.array([1, 1, 0, 0], dtype=np.complex128))
    with pytest.raises(NormalizationError):
        st.check_normalized()
    AmplitudeState.uniform(2).check_normalized()

def test_repr():
    assert "uninitialized" in repr(AmplitudeEngine())
    assert "marked=3" in repr(AmplitudeEngine(2, 3))

def test_state_copy_is_independent():
    st = AmplitudeState.uniform(3)
    dup = st.copy()
    dup.psi[0] = 0.0
    assert dup.n == 3
    assert st.psi[0] == pytest.approx(1 / np.sqrt(8))
