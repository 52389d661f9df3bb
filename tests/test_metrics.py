import numpy as np
from pytest import approx

from murmuration.analysis.metrics import flock_summary, fragmentation, order_parameter
from murmuration.core.population import Population


def test_order_parameter_aligned_and_opposed():
    assert order_parameter(np.array([[1.0, 0.0], [3.0, 0.0], [0.5, 0.0]])) == approx(1.0)
    assert order_parameter(np.array([[1.0, 0.0], [-1.0, 0.0]])) == approx(0.0)


def test_order_parameter_at_rest_is_zero():
    assert order_parameter(np.zeros((4, 2))) == 0.0


def test_fragmentation_counts_groups():
    pos = np.array([[0.0, 0.0], [1.0, 0.0], [2.0, 0.0], [50.0, 50.0], [51.0, 50.0], [200.0, 0.0]])
    n_groups, largest = fragmentation(pos, connection_radius=1.5)
    assert n_groups == 3
    assert largest == 3


def test_fragmentation_all_isolated():
    pos = np.array([[0.0, 0.0], [10.0, 0.0], [20.0, 0.0]])
    assert fragmentation(pos, connection_radius=1.0) == (3, 1)


def test_flock_summary(fixed_noise, far_predator_params):
    flock = Population.scattered(30, params=far_predator_params, noise=fixed_noise(0.5), seed=4)
    flock.update(4, 1 / 30)
    summary = flock_summary(flock, connection_radius=1e7)
    assert summary["tick"] == 1
    assert summary["mood"] == approx(0.25)
    assert summary["fragments"] == 1
    assert summary["cohesion"] == approx(1.0)
    assert 0.0 <= summary["order"] <= 1.0
    assert summary["mean_speed"] > 0
