import pytest

from probability_lab.cdf import build_cdf, sample_index


def const(value):
    return lambda: value


def test_build_cdf_prefix_sums_and_normalizes():
    cdf = build_cdf([1.0, 1.0, 2.0])
    assert cdf == pytest.approx([0.25, 0.5, 1.0])
    assert cdf[-1] == 1.0


def test_build_cdf_is_non_decreasing():
    cdf = build_cdf([0.1, 0.0, 0.3, 0.0, 0.6])
    assert all(a <= b for a, b in zip(cdf, cdf[1:]))
    assert cdf[-1] == 1.0


def test_build_cdf_degenerate_input_yields_zeros():
    assert build_cdf([0.0, 0.0, 0.0]) == [0.0, 0.0, 0.0]
    assert build_cdf([-1.0, 0.5]) == [0.0, 0.0]


def test_build_cdf_empty():
    assert build_cdf([]) == []


def test_sample_index_extremes():
    cdf = build_cdf([0.2, 0.3, 0.5])
    assert sample_index(const(0.0), cdf) == 0
    assert sample_index(const(0.999999), cdf) == 2
    assert sample_index(const(1.0), cdf) == len(cdf) - 1


def test_sample_index_breakpoints():
    cdf = [0.25, 0.5, 0.75, 1.0]
    assert sample_index(const(0.2499), cdf) == 0
    assert sample_index(const(0.25), cdf) == 1
    assert sample_index(const(0.2501), cdf) == 1
    assert sample_index(const(0.4999), cdf) == 1
    assert sample_index(const(0.5), cdf) == 2
    assert sample_index(const(0.75), cdf) == 3


def test_sample_index_degenerate_cdf_never_raises():
    assert sample_index(const(0.0), [0.0, 0.0, 0.0]) == 2
    assert sample_index(const(0.5), []) == 0


def test_sample_index_draws_once_per_call():
    draws = []

    def rng():
        draws.append(1)
        return 0.3

    sample_index(rng, [0.5, 1.0])
    assert len(draws) == 1
