from probability_lab.devices import DeviceConfig, build_device_definition
from probability_lab.history import IndexHistory
from probability_lab.rng import create_rng_from_seed
from probability_lab.simulate_single import simulate_single_trials
from probability_lab.state import SingleTrialState


def make_state(config=None, history=True):
    return SingleTrialState(
        definition=build_device_definition(config),
        history=IndexHistory() if history else None,
    )


def test_counts_and_trials_accumulate():
    state = make_state(DeviceConfig(kind="die"))
    rng = create_rng_from_seed("single")

    simulate_single_trials(state, rng, 250)
    simulate_single_trials(state, rng, 750)

    assert state.trials == 1000
    assert sum(state.counts) == 1000
    assert len(state.history) == 1000
    assert state.last_outcome == state.history.get(999)


def test_history_matches_counts():
    state = make_state(DeviceConfig(kind="spinner", spinner_sectors=5, spinner_skew=0.8))
    simulate_single_trials(state, create_rng_from_seed("h"), 3000)

    tally = [0] * 5
    for i in range(len(state.history)):
        tally[state.history.get(i)] += 1
    assert tally == state.counts


def test_non_positive_n_and_missing_definition_are_no_ops():
    state = make_state()
    rng = create_rng_from_seed("noop")
    simulate_single_trials(state, rng, 0)
    simulate_single_trials(state, rng, -5)
    assert state.trials == 0
    assert state.convergence == []

    empty = SingleTrialState()
    simulate_single_trials(empty, rng, 10)
    assert empty.trials == 0
    assert empty.counts == []


def test_works_without_history_sink():
    state = make_state(history=False)
    simulate_single_trials(state, create_rng_from_seed("x"), 100)
    assert state.trials == 100
    assert state.history is None


def test_same_seed_same_outcomes():
    a = make_state(DeviceConfig(kind="die"))
    b = make_state(DeviceConfig(kind="die"))
    simulate_single_trials(a, create_rng_from_seed("repeat"), 500)
    simulate_single_trials(b, create_rng_from_seed("repeat"), 500)
    assert a.counts == b.counts
    assert [a.history.get(i) for i in range(500)] == [b.history.get(i) for i in range(500)]


def test_frequencies_track_probabilities():
    state = make_state(DeviceConfig(kind="coin", coin_probabilities=[0.8, 0.2]))
    simulate_single_trials(state, create_rng_from_seed("lln"), 20000)
    assert abs(state.counts[0] / state.trials - 0.8) < 0.02


def test_convergence_log_snapshots_relative_frequencies():
    state = make_state()
    rng = create_rng_from_seed("conv")
    simulate_single_trials(state, rng, 10)

    point = state.convergence[-1]
    assert point.trials == 10
    assert sum(point.relative) == 1.0 or abs(sum(point.relative) - 1.0) < 1e-12
    assert point.relative[0] == state.counts[0] / 10


def test_convergence_log_is_halved_past_cap():
    state = make_state()
    rng = create_rng_from_seed("cap")
    for _ in range(5):
        simulate_single_trials(state, rng, 1, convergence_cap=4)

    assert [p.trials for p in state.convergence] == [1, 3, 5]


def test_convergence_can_be_skipped():
    state = make_state()
    simulate_single_trials(state, create_rng_from_seed("c"), 10, record_convergence=False)
    assert state.convergence == []


def test_reset_clears_everything():
    state = make_state()
    simulate_single_trials(state, create_rng_from_seed("r"), 100)
    die = build_device_definition(DeviceConfig(kind="die"))

    state.reset(die)

    assert state.definition is die
    assert state.counts == [0] * 6
    assert state.trials == 0
    assert state.last_outcome is None
    assert state.convergence == []
    assert len(state.history) == 0
