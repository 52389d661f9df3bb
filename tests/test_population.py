import math

import numpy as np
import pytest
from pytest import approx

from murmuration.config import ConfigurationError, FlockParams
from murmuration.core.agent import Agent
from murmuration.core.forces import ForceBreakdown
from murmuration.core.noise_source import ConstantNoise
from murmuration.core.population import Population
from murmuration.core.vector import Vector2


def square_flock(params, noise, side=10.0):
    corners = [(0.0, 0.0), (side, 0.0), (0.0, side), (side, side)]
    agents = [Agent(position=Vector2(x, y)) for x, y in corners]
    return Population(agents, params=params, noise=noise)


def snapshot(flock):
    return [(a.position.as_tuple(), a.velocity.as_tuple()) for a in flock.agents]


def test_single_agent_is_rejected():
    with pytest.raises(ConfigurationError):
        Population([Agent()])


def test_zero_neighbors_is_rejected_before_anything_moves(fixed_noise, far_predator_params):
    flock = square_flock(far_predator_params, fixed_noise(1.0))
    before = snapshot(flock)
    with pytest.raises(ConfigurationError):
        flock.update(0, 1 / 30)
    assert snapshot(flock) == before
    assert flock.tick == 0
    assert flock.mood_clock == 0.0


@pytest.mark.parametrize("dt", [-0.1, math.nan, math.inf])
def test_bad_dt_is_rejected(fixed_noise, far_predator_params, dt):
    flock = square_flock(far_predator_params, fixed_noise(1.0))
    with pytest.raises(ConfigurationError):
        flock.update(3, dt)


def test_non_finite_agent_is_rejected():
    agents = [Agent(position=Vector2(math.nan, 0.0)), Agent()]
    with pytest.raises(ConfigurationError):
        Population(agents)


def test_bad_params_are_rejected():
    with pytest.raises(ConfigurationError):
        Population([Agent(), Agent(position=Vector2(1.0, 0.0))], params=FlockParams(half_width=0.0))


def test_population_size_is_fixed():
    flock = Population.scattered(12, seed=1)
    assert len(flock) == 12
    assert isinstance(flock.agents, tuple)
    flock.update(3, 1 / 60)
    assert len(flock) == 12


def test_four_corner_square_moves_radially(fixed_noise, far_predator_params):
    flock = square_flock(far_predator_params, fixed_noise(1.0))
    assert flock.predator.dist(Vector2(5.0, 5.0)) > 10_000

    mood = flock.update(3, 1 / 30)
    assert mood == approx(1.0)

    center = Vector2(5.0, 5.0)
    for agent in flock.agents:
        assert agent.position.is_finite() and agent.velocity.is_finite()
        for vec in agent.forces.as_dict().values():
            assert vec.is_finite()
        # Symmetry keeps every velocity on the line through the centre
        to_center = (center - agent.position).normalize()
        assert abs(agent.velocity.normalize().dot(to_center)) == approx(1.0)


def test_four_corner_square_gathers_when_cohesion_dominates(fixed_noise):
    # At 10 units apart the default separation (2000 / d^2) outweighs cohesion,
    # so soften it to see cohesion pull the corners in
    params = FlockParams(half_width=1e6, half_height=1e6, separation=100.0)
    flock = square_flock(params, fixed_noise(1.0))
    flock.update(3, 1 / 30)

    center = Vector2(5.0, 5.0)
    for agent in flock.agents:
        to_center = (center - agent.position).normalize()
        assert agent.velocity.normalize().dot(to_center) == approx(1.0)


def test_four_corner_square_spreads_with_default_separation(fixed_noise, far_predator_params):
    flock = square_flock(far_predator_params, fixed_noise(1.0))
    flock.update(3, 1 / 30)

    center = Vector2(5.0, 5.0)
    for agent in flock.agents:
        to_center = (center - agent.position).normalize()
        assert agent.velocity.normalize().dot(to_center) == approx(-1.0)


def test_forces_are_computed_before_anyone_moves(fixed_noise, far_predator_params):
    flock = square_flock(far_predator_params, fixed_noise(1.0))
    before = [a.position for a in flock.agents]

    flock.update(3, 1 / 30)

    # Rebuild what agent 3 should have seen from the original positions
    expected_sep = Vector2()
    me = before[3]
    for other in before[:3]:
        away = me - other
        expected_sep = expected_sep + away.set_mag(2000.0 / away.mag_sq())
    assert flock.agents[3].forces.separation.as_tuple() == approx(expected_sep.as_tuple())


def test_forces_are_replaced_every_tick(fixed_noise, far_predator_params):
    flock = square_flock(far_predator_params, fixed_noise(1.0))
    flock.update(3, 1 / 30)
    first = [a.forces for a in flock.agents]
    flock.update(3, 1 / 30)
    for old, agent in zip(first, flock.agents):
        assert isinstance(agent.forces, ForceBreakdown)
        assert agent.forces is not old


def test_noise_clocks_advance_once_per_tick_regardless_of_dt(fixed_noise, far_predator_params):
    flock = square_flock(far_predator_params, fixed_noise(0.5))
    flock.update(3, 1 / 60)
    flock.update(3, 0.5)
    assert flock.mood_clock == approx(2 * flock.mood_clock_step)
    assert flock.predator_clock == approx(2 * flock.predator_clock_step)
    assert flock.tick == 2


def test_mood_and_predator_mapping(fixed_noise):
    params = FlockParams(half_width=100.0, half_height=50.0)

    def pair():
        return [Agent(), Agent(position=Vector2(1.0, 0.0))]

    low = Population(pair(), params=params, noise=fixed_noise(0.0))
    assert low.update(1, 0.0) == approx(-0.5)
    assert low.predator.as_tuple() == approx((-100.0, -50.0))

    high = Population(pair(), params=params, noise=fixed_noise(1.0))
    assert high.update(1, 0.0) == approx(1.0)
    assert high.predator.as_tuple() == approx((100.0, 50.0))


def test_predator_axes_sample_decorrelated_clocks(fixed_noise, far_predator_params):
    noise = fixed_noise(0.5)
    flock = square_flock(far_predator_params, noise)
    noise.samples.clear()
    flock.update(3, 1 / 30)
    # mood, predator x, predator y
    assert len(noise.samples) == 3
    assert noise.samples[1] != noise.samples[2]


def test_dt_is_clamped(fixed_noise, far_predator_params):
    a = square_flock(far_predator_params, fixed_noise(1.0))
    b = square_flock(far_predator_params, fixed_noise(1.0))
    a.update(3, 5.0)
    b.update(3, 1.0)
    assert snapshot(a) == snapshot(b)


def test_explicit_params_override_population_defaults(fixed_noise, far_predator_params):
    a = square_flock(far_predator_params, fixed_noise(1.0))
    b = square_flock(far_predator_params, fixed_noise(1.0))
    a.update(3, 1 / 30)
    b.update(3, 1 / 30, params=FlockParams(half_width=1e6, half_height=1e6, separation=0.0))
    assert snapshot(a) != snapshot(b)
    assert b.agents[0].forces.separation == Vector2()


def test_stays_finite_over_many_ticks():
    flock = Population.scattered(60, params=FlockParams(), noise=ConstantNoise(0.3), seed=7)
    for _ in range(300):
        flock.update(6, 1 / 60)
    assert np.all(np.isfinite(flock.positions()))
    assert np.all(np.isfinite(flock.velocities()))


def test_stays_finite_with_perlin_noise_and_hitches():
    flock = Population.scattered(40, seed=2)
    for i in range(200):
        flock.update(5, 2.0 if i % 50 == 0 else 1 / 60)
    assert np.all(np.isfinite(flock.positions()))
    assert np.all(np.isfinite(flock.velocities()))


def test_deterministic_runs():
    def run():
        flock = Population.scattered(50, seed=99)
        for k in [3, 6, 6, 1, 10] * 20:
            flock.update(k, 1 / 60)
        return flock.positions(), flock.velocities()

    pos_a, vel_a = run()
    pos_b, vel_b = run()
    assert np.array_equal(pos_a, pos_b)
    assert np.array_equal(vel_a, vel_b)


def test_scattered_placement_is_centred_and_at_rest():
    params = FlockParams(half_width=400.0, half_height=200.0)
    flock = Population.scattered(2000, params=params, seed=5)
    pos = flock.positions()
    assert np.abs(pos.mean(axis=0)).max() < 10.0
    assert pos[:, 0].std() == approx(100.0, rel=0.1)
    assert pos[:, 1].std() == approx(50.0, rel=0.1)
    assert not flock.velocities().any()


def test_independent_populations_do_not_interact(fixed_noise, far_predator_params):
    alone = square_flock(far_predator_params, fixed_noise(1.0))
    alone.update(3, 1 / 30)

    a = square_flock(far_predator_params, fixed_noise(1.0))
    b = Population.scattered(20, seed=3)
    b.update(5, 1 / 30)
    a.update(3, 1 / 30)
    b.update(5, 1 / 30)

    assert snapshot(a) == snapshot(alone)


def test_predator_axes_never_centre_together_on_integer_clocks():
    flock = Population.scattered(10, params=FlockParams(half_width=640.0, half_height=360.0), seed=0)
    for clock in range(1, 10):
        # Land the predator clock exactly on a whole number
        flock.predator_clock = clock - flock.predator_clock_step
        flock.advance_clocks()
        # Perlin noise reads 0.5 on integers, so x is centred here but y must not be
        assert flock.predator.x == approx(0.0, abs=1e-3)
        assert flock.predator.y != approx(0.0, abs=1e-6)


def test_predator_y_offset_is_configurable(fixed_noise, far_predator_params):
    noise = fixed_noise(0.5)
    flock = Population(
        [Agent(), Agent(position=Vector2(1.0, 0.0))],
        params=far_predator_params,
        noise=noise,
        predator_y_offset=7.25,
    )
    noise.samples.clear()
    flock.update(1, 1 / 30)
    assert noise.samples[2] - noise.samples[1] == approx(7.25)
