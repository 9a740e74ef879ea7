import pytest

from probability_lab.devices import DeviceConfig, build_device_definition
from probability_lab.history import PackedPairHistory
from probability_lab.relationships import COMPLEMENT, COPY, DEFAULT_BOOST, INDEPENDENT, Dependent, check_relationship
from probability_lab.rng import create_rng_from_seed
from probability_lab.simulate_two import boosted_probabilities, dependent_cdfs, half_split, simulate_two_trials
from probability_lab.state import TwoTrialState

from simulations.common import same_half_share


def make_state(kind_a="coin", kind_b="coin", relationship=INDEPENDENT):
    return TwoTrialState(
        definition_a=build_device_definition(DeviceConfig(kind=kind_a)),
        definition_b=build_device_definition(DeviceConfig(kind=kind_b)),
        relationship=relationship,
        history=PackedPairHistory(),
    )


def pairs(state):
    return [state.history.get_pair(i) for i in range(len(state.history))]


def assert_consistent(state):
    assert sum(state.counts_a) == sum(state.counts_b) == state.trials
    assert [sum(row) for row in state.joint] == state.counts_a
    assert [sum(col) for col in zip(*state.joint)] == state.counts_b
    assert len(state.history) == state.trials


def test_state_initializes_joint_matrix():
    state = make_state("die", "coin")
    assert len(state.joint) == 6
    assert all(len(row) == 2 for row in state.joint)
    assert state.counts_a == [0] * 6
    assert state.counts_b == [0] * 2


def test_independent_updates_all_counters():
    state = make_state("die", "spinner")
    simulate_two_trials(state, create_rng_from_seed("ind"), 2000)
    assert state.trials == 2000
    assert_consistent(state)
    assert (state.last_a, state.last_b) == state.history.get_pair(1999)


def test_copy_repeats_a():
    state = make_state("die", "die", COPY)
    simulate_two_trials(state, create_rng_from_seed("copy"), 1000)
    assert all(a == b for a, b in pairs(state))
    assert_consistent(state)


def test_copy_outside_b_domain_draws_b_independently():
    state = make_state("die", "coin", COPY)
    simulate_two_trials(state, create_rng_from_seed("copy-mismatch"), 1000)
    assert all(b < 2 for _, b in pairs(state))
    assert_consistent(state)


def test_complement_flips_coin():
    state = make_state("coin", "coin", COMPLEMENT)
    simulate_two_trials(state, create_rng_from_seed("comp"), 1000)
    assert all(b == 1 - a for a, b in pairs(state))
    assert state.joint[0][0] == state.joint[1][1] == 0


def test_complement_needs_coin_a():
    state = make_state("die", "die", COMPLEMENT)
    simulate_two_trials(state, create_rng_from_seed("comp-die"), 1000)
    assert_consistent(state)
    assert any(b != 1 - a for a, b in pairs(state))


def test_dependent_raises_same_half_share():
    dep = make_state("die", "die", Dependent(3.5))
    ind = make_state("die", "die", INDEPENDENT)
    simulate_two_trials(dep, create_rng_from_seed("dep"), 20000)
    simulate_two_trials(ind, create_rng_from_seed("dep"), 20000)

    assert_consistent(dep)
    assert same_half_share(ind.joint) == pytest.approx(0.5, abs=0.03)
    # uniform die halves: 3.5 / 4.5
    assert same_half_share(dep.joint) == pytest.approx(3.5 / 4.5, abs=0.03)
    assert same_half_share(dep.joint) > same_half_share(ind.joint)


def test_boosted_probabilities():
    out = boosted_probabilities([1 / 6] * 6, True, 3.5)
    assert out == pytest.approx([1 / 13.5] * 3 + [3.5 / 13.5] * 3)
    out = boosted_probabilities([1 / 6] * 6, False, 3.5)
    assert out == pytest.approx([3.5 / 13.5] * 3 + [1 / 13.5] * 3)


def test_half_split_rounds_up():
    assert half_split(2) == 1
    assert half_split(5) == 3
    assert half_split(6) == 3


def test_dependent_cdfs_end_at_one():
    low, high = dependent_cdfs(build_device_definition(DeviceConfig(kind="spinner", spinner_sectors=7)), 2.0)
    assert low[-1] == high[-1] == 1.0
    assert low[3] > high[3]


def test_missing_definition_is_no_op():
    state = TwoTrialState(definition_a=build_device_definition())
    simulate_two_trials(state, create_rng_from_seed("x"), 10)
    assert state.trials == 0


def test_same_seed_same_pairs():
    a = make_state("die", "spinner", Dependent())
    b = make_state("die", "spinner", Dependent())
    simulate_two_trials(a, create_rng_from_seed("pairs"), 300)
    simulate_two_trials(b, create_rng_from_seed("pairs"), 300)
    assert pairs(a) == pairs(b)
    assert a.joint == b.joint


def test_reset_rebuilds_matrices_and_clears_history():
    state = make_state()
    simulate_two_trials(state, create_rng_from_seed("r"), 50)
    state.reset(definition_b=build_device_definition(DeviceConfig(kind="die")), relationship=COPY)

    assert state.relationship == COPY
    assert state.counts_b == [0] * 6
    assert len(state.joint) == 2 and len(state.joint[0]) == 6
    assert state.trials == 0
    assert state.last_a is None and state.last_b is None
    assert len(state.history) == 0


@pytest.mark.parametrize("value", ["copy", "complement", "dependent", None, 3.5])
def test_check_relationship_rejects_non_modes(value):
    with pytest.raises(TypeError, match="not a relationship"):
        check_relationship(value)


def test_check_relationship_passes_modes_through():
    for mode in (INDEPENDENT, COPY, COMPLEMENT, Dependent(2.0)):
        assert check_relationship(mode) is mode


def test_dependent_default_boost():
    assert Dependent().boost_factor == DEFAULT_BOOST == 3.5


def test_string_relationship_rejected_at_construction():
    with pytest.raises(TypeError, match="not a relationship"):
        make_state(relationship="copy")


def test_string_relationship_rejected_before_any_trial():
    state = make_state()
    state.relationship = "copy"
    with pytest.raises(TypeError, match="not a relationship"):
        simulate_two_trials(state, create_rng_from_seed("tag"), 10)
    assert state.trials == 0
    assert len(state.history) == 0


def test_string_relationship_rejected_on_reset():
    state = make_state()
    with pytest.raises(TypeError, match="not a relationship"):
        state.reset(relationship="dependent")
    assert state.relationship == INDEPENDENT
