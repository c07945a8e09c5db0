import math
from dataclasses import replace

import numpy as np
import pytest

from flight_constants import METERS_TO_YARDS
from flight_errors import InvalidInput, NonConvergent
from flight_types import Vector3, launch_state
from golf_ball_trajectory import GolfBallTrajectory, integrate, iter_trajectory, summarize
from three_d_body import ThreeDBody
from wind_resolver import wind_vector


def test_golf_ball_lands(standard_env, ball):
    """Check that simulated trajectories cross the ground for typical speeds and spins."""
    speeds = [60, 70, 80]
    back_spins = [1500, 3000, 4500]
    for bs in back_spins:
        for v0 in speeds:
            points, _ = integrate(launch_state(v0, 15, 0, bs), standard_env, ball)
            assert points[-1].position.y == 0.0, f"Ball did not land for speed={v0}, spin={bs}"
            assert all(p.position.y >= 0 for p in points)


def test_golf_ball_max_height_increases_with_speed(standard_env, ball):
    """Verify apex height increases with initial speed."""
    heights = []
    for v0 in [60, 70, 80]:
        _, metrics = integrate(launch_state(v0, 15, 0, 4500), standard_env, ball)
        heights.append(metrics.max_height)
    assert heights[0] < heights[1] < heights[2], f"Max height does not increase with speed: {heights}"


def test_simulation_deterministic_delta(standard_env, ball):
    """Ensure repeated simulations with identical inputs are numerically identical."""
    state = launch_state(70, 15, 5, 3000, spin_axis=Vector3(0.0, -0.1, 1.0))
    a = ThreeDBody.from_points(integrate(state, standard_env, ball, dt=0.01)[0])
    b = ThreeDBody.from_points(integrate(state, standard_env, ball, dt=0.01)[0])
    max_dx = float(np.max(np.abs(a.x - b.x)))
    max_dy = float(np.max(np.abs(a.y - b.y)))
    max_dz = float(np.max(np.abs(a.z - b.z)))
    assert max_dx < 1e-12 and max_dy < 1e-12 and max_dz < 1e-12, (
        f"Determinism regression: max_dx={max_dx}, max_dy={max_dy}, max_dz={max_dz}"
    )


def test_samples_are_time_ordered(standard_env, ball, standard_shot):
    points, _ = integrate(standard_shot, standard_env, ball, dt=0.01)
    times = np.array([p.time for p in points])
    assert times[0] == 0.0
    assert np.all(np.diff(times) > 0)
    assert np.all(np.diff(times)[:-1] == pytest.approx(0.01))


def test_vacuum_flight_matches_analytic_range(standard_env, ball):
    still = replace(ball, drag_coefficient=0.0, lift_coefficient=0.0, magnus_coefficient=0.0)
    v0, angle = 70.0, 23.0
    _, metrics = integrate(launch_state(v0, angle), standard_env, still, dt=0.01)
    ideal = v0**2 * math.sin(math.radians(2 * angle)) / 9.81
    assert metrics.carry_distance / METERS_TO_YARDS == pytest.approx(ideal, rel=1e-3)
    assert metrics.time_of_flight == pytest.approx(2 * v0 * math.sin(math.radians(angle)) / 9.81, rel=1e-3)


def test_drag_shortens_flight_below_vacuum_range(standard_env, ball):
    v0, angle = 70.0, 23.0
    _, metrics = integrate(launch_state(v0, angle, 0, 0), standard_env, ball)
    ideal = v0**2 * math.sin(math.radians(2 * angle)) / 9.81
    carry_m = metrics.carry_distance / METERS_TO_YARDS
    assert carry_m < ideal
    # Cd 0.22 at 70 m/s decelerates at roughly 2 g: the loss is large, not marginal.
    assert carry_m < 0.8 * ideal

    lighter = replace(ball, drag_coefficient=0.1)
    _, less_drag = integrate(launch_state(v0, angle, 0, 0), standard_env, lighter)
    assert carry_m < less_drag.carry_distance / METERS_TO_YARDS < ideal


def test_standard_shot_matches_reference_flight(standard_env, ball, standard_shot):
    """70 m/s, 23 deg, 2500 rpm in 20 C dry-ish air: about 245 yd carry, 32 yd apex, 6.2 s."""
    _, metrics = integrate(standard_shot, standard_env, ball)
    assert metrics.carry_distance == pytest.approx(245.0, rel=0.05)
    assert metrics.total_distance == pytest.approx(255.0, rel=0.05)
    assert metrics.total_distance == pytest.approx(metrics.carry_distance + 10.0)
    assert metrics.max_height == pytest.approx(32.0, rel=0.05)
    assert metrics.time_of_flight == pytest.approx(6.2, rel=0.05)
    assert metrics.launch_angle == pytest.approx(23.0)
    assert metrics.launch_direction == pytest.approx(0.0, abs=1e-9)
    assert metrics.ball_speed == pytest.approx(70.0)
    assert metrics.spin_rate == pytest.approx(2500.0)
    assert abs(metrics.lateral_deviation) < 1e-9


def test_spin_decays_exponentially(standard_env, ball, standard_shot):
    points, metrics = integrate(standard_shot, standard_env, ball)
    expected = 2500.0 * math.exp(-ball.spin_decay_rate * metrics.time_of_flight)
    assert points[-1].spin == pytest.approx(expected, rel=1e-3)


def test_iterator_is_lazy_and_starts_at_launch(standard_env, ball, standard_shot):
    it = iter_trajectory(standard_shot, standard_env, ball)
    first = next(it)
    assert first.time == 0.0
    assert first.position == standard_shot.position
    assert first.velocity == standard_shot.velocity
    second = next(it)
    assert second.time == pytest.approx(0.01)


def test_trajectory_cannot_be_restarted(standard_env, ball, standard_shot):
    traj = GolfBallTrajectory(standard_shot, standard_env, ball)
    list(traj.points())
    assert traj.landed
    with pytest.raises(RuntimeError):
        traj.points()


def test_step_budget_exhaustion_is_non_convergent(standard_env, ball, standard_shot):
    with pytest.raises(NonConvergent) as excinfo:
        integrate(standard_shot, standard_env, ball, max_steps=5)
    assert excinfo.value.steps == 5


def test_sidespin_curves_ball(standard_env, ball):
    fade = launch_state(70, 15, 0, 3000, spin_axis=Vector3(0.0, -0.3, 1.0))
    draw = launch_state(70, 15, 0, 3000, spin_axis=Vector3(0.0, 0.3, 1.0))
    assert integrate(fade, standard_env, ball)[1].lateral_deviation > 0
    assert integrate(draw, standard_env, ball)[1].lateral_deviation < 0


def test_wind_moves_the_ball(standard_env, ball, standard_shot):
    into = integrate(standard_shot, replace(standard_env, wind=wind_vector(10, 0)), ball)[1]
    helping = integrate(standard_shot, replace(standard_env, wind=wind_vector(10, 180)), ball)[1]
    assert into.carry_distance < helping.carry_distance

    from_right = integrate(standard_shot, replace(standard_env, wind=wind_vector(10, 90)), ball)[1]
    assert from_right.lateral_deviation < 0


def test_wind_profile_option_runs(standard_env, ball, standard_shot):
    env = replace(standard_env, wind=wind_vector(8, 0))
    flat = integrate(standard_shot, env, ball)[1]
    profiled = integrate(standard_shot, env, ball, wind_profile=True)[1]
    assert profiled.carry_distance != flat.carry_distance


def test_summarize_from_body_arrays(standard_env, ball, standard_shot):
    points, metrics = integrate(standard_shot, standard_env, ball)
    body = ThreeDBody.from_points(points)
    assert body.x.size == body.y.size == body.z.size == body.t.size == len(points)
    assert metrics.max_height == pytest.approx(body.y[body.apex_index()] * METERS_TO_YARDS)
    assert summarize(points) == metrics


@pytest.mark.parametrize("dt", [0.0, -0.01, float("nan")])
def test_rejects_bad_step(standard_env, ball, standard_shot, dt):
    with pytest.raises(InvalidInput):
        GolfBallTrajectory(standard_shot, standard_env, ball, dt=dt)


def test_humid_air_shortens_the_standard_shot(standard_env, ball, standard_shot):
    _, dry = integrate(standard_shot, standard_env, ball)
    _, humid = integrate(standard_shot, replace(standard_env, humidity=0.9), ball)
    assert humid.carry_distance < dry.carry_distance
    assert humid.time_of_flight < dry.time_of_flight


def test_barely_spinning_ball_flies_like_a_spinless_one(standard_env, ball):
    _, still = integrate(launch_state(70, 23, 0, 0), standard_env, ball)
    _, slow = integrate(launch_state(70, 23, 0, 1), standard_env, ball)
    assert slow.carry_distance == pytest.approx(still.carry_distance, rel=1e-3)
    assert slow.max_height == pytest.approx(still.max_height, rel=1e-3)


def test_rejects_state_mass_that_disagrees_with_ball(standard_env, ball, standard_shot):
    with pytest.raises(InvalidInput) as excinfo:
        GolfBallTrajectory(replace(standard_shot, mass=0.05), standard_env, ball)
    assert excinfo.value.field == "state.mass"
    heavier = replace(ball, mass=0.05)
    points, _ = integrate(replace(standard_shot, mass=0.05), standard_env, heavier)
    assert points[-1].position.y == 0.0
