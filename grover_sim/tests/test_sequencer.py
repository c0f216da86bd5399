# grover_sim/tests/test_sequencer.py
import numpy as np
import pytest
from grover_sim.engine import AmplitudeEngine
from grover_sim.errors import SequencerError
from grover_sim.sequencer import DEFAULT_LEVELS, Level, LevelSequencer, Phase

def make_seq(levels=DEFAULT_LEVELS, seed=0):
    return LevelSequencer(AmplitudeEngine(), levels, rng=np.random.default_rng(seed))

def test_level_budget_defaults_to_optimal():
    assert Level(4).budget == 3
    assert Level(8).budget == 13
    assert Level(3, 5).budget == 5
    assert Level(3, 0).budget == 1

def test_full_level_flow_with_win():
    seq = make_seq([Level(3, 2)])
    marked = seq.start_level(marked=5)
    assert marked == 5
    assert seq.phase is Phase.READY
    assert seq.engine.iteration == 0

    probs = seq.trigger_oracle()
    assert seq.phase is Phase.AMPLIFIED
    assert probs[5] == pytest.approx(0.78125)
    assert seq.hints_left == 1

    seq.request_hint()
    assert seq.engine.iteration == 2
    assert seq.hints_left == 0
    with pytest.raises(SequencerError):
        seq.request_hint()

    guess = seq.engine.get_max_probability_index()
    assert seq.submit_guess(guess) is True
    assert seq.phase is Phase.WON
    assert seq.next_level() is False

def test_wrong_guess_fails():
    seq = make_seq([Level(2, 1)])
    seq.start_level(marked=3)
    seq.trigger_oracle()
    assert seq.submit_guess(0) is False
    assert seq.phase is Phase.FAILED
    with pytest.raises(SequencerError):
        seq.next_level()
    # retry re-initializes the same level
    seq.start_level(marked=3)
    assert seq.phase is Phase.READY

def test_marked_drawn_from_rng_is_reproducible():
    a = make_seq(seed=42)
    b = make_seq(seed=42)
    for _ in range(5):
        assert a.start_level(index=2) == b.start_level(index=2)
        assert 0 <= a.engine.marked < 16

def test_phase_order_enforced():
    seq = make_seq()
    with pytest.raises(SequencerError):
        seq.trigger_oracle()
    seq.start_level()
    with pytest.raises(SequencerError):
        seq.submit_guess(0)
    with pytest.raises(SequencerError):
        seq.request_hint()
    seq.trigger_oracle()
    with pytest.raises(SequencerError):
        seq.trigger_oracle()

def test_levels_advance_in_order():
    seq = make_seq(seed=1)
    for i, level in enumerate(DEFAULT_LEVELS):
        assert seq.level_index == i
        seq.start_level()
        assert seq.engine.n_qubits == level.n_qubits
        seq.trigger_oracle()
        seq.submit_guess(seq.engine.marked)
        assert seq.next_level() is (i + 1 < len(DEFAULT_LEVELS))

def test_bad_level_arguments():
    with pytest.raises(ValueError):
        LevelSequencer(AmplitudeEngine(), [])
    with pytest.raises(IndexError):
        make_seq().start_level(index=99)
