import math

import numpy as np
import pytest

from rigging.solver import (
    EPS,
    clamp,
    forward_positions,
    reach_band,
    solve_one_bone,
    solve_two_bone,
)


def test_clamp_basic():
    assert clamp(5.0, 0.0, 1.0) == 1.0
    assert clamp(-5.0, 0.0, 1.0) == 0.0
    assert clamp(0.25, 0.0, 1.0) == 0.25


def test_reach_band():
    assert reach_band(100.0, 80.0) == (20.0, 180.0)
    assert reach_band(80.0, 100.0) == (20.0, 180.0)


def test_two_bone_reachable_scenario():
    sol = solve_two_bone((0.0, 0.0), (120.0, 0.0), 100.0, 80.0)
    a1, a2 = sol.angles
    phi = math.acos(0.75)
    theta2 = math.acos(0.125)
    assert a1 == pytest.approx(-phi, abs=1e-9)
    assert a2 == pytest.approx(-phi + math.pi - theta2, abs=1e-9)
    assert a1 == pytest.approx(-0.7227, abs=1e-4)
    assert a2 == pytest.approx(0.974, abs=1e-3)
    assert sol.reached
    assert not sol.degenerate

    pos = forward_positions((0.0, 0.0), (100.0, 80.0), sol.angles)
    np.testing.assert_allclose(pos[-1], [120.0, 0.0], atol=1e-6)


def test_two_bone_unreachable_extends_straight():
    sol = solve_two_bone((0.0, 0.0), (300.0, 0.0), 100.0, 80.0)
    a1, a2 = sol.angles
    assert a1 == pytest.approx(0.0, abs=1e-12)
    assert a2 == pytest.approx(0.0, abs=1e-12)
    assert sol.distance == pytest.approx(180.0)
    assert not sol.reached


def test_two_bone_too_close_clamps_to_inner_radius():
    sol = solve_two_bone((0.0, 0.0), (5.0, 0.0), 100.0, 80.0)
    pos = forward_positions((0.0, 0.0), (100.0, 80.0), sol.angles)
    np.testing.assert_allclose(pos[-1], [20.0, 0.0], atol=1e-6)
    assert not sol.reached


def test_two_bone_degenerate_equal_lengths_at_origin():
    sol = solve_two_bone((10.0, -4.0), (10.0, -4.0), 50.0, 50.0)
    assert sol.angles == (0.0, math.pi)
    assert sol.degenerate


def test_two_bone_target_at_origin_unequal_lengths_no_nan():
    sol = solve_two_bone((0.0, 0.0), (0.0, 0.0), 100.0, 80.0)
    assert all(math.isfinite(a) for a in sol.angles)


@pytest.mark.parametrize("l1,l2", [(0.0, 50.0), (50.0, 0.0), (0.0, 0.0), (-30.0, 50.0)])
def test_two_bone_degenerate_lengths_no_nan(l1, l2):
    for target in [(0.0, 0.0), (10.0, 20.0), (-300.0, 5.0)]:
        sol = solve_two_bone((0.0, 0.0), target, l1, l2)
        assert all(math.isfinite(a) for a in sol.angles)


def test_two_bone_zero_second_bone_points_at_target():
    sol = solve_two_bone((0.0, 0.0), (0.0, 200.0), 60.0, 0.0)
    assert sol.angles[0] == pytest.approx(math.pi / 2)
    assert sol.angles[1] == pytest.approx(math.pi / 2)


def test_two_bone_is_deterministic():
    a = solve_two_bone((3.0, 4.0), (70.0, -20.0), 60.0, 45.0)
    b = solve_two_bone((3.0, 4.0), (70.0, -20.0), 60.0, 45.0)
    assert a.angles == b.angles


def test_reachability_property_random():
    rng = np.random.default_rng(1234)
    for _ in range(500):
        l1, l2 = rng.uniform(1.0, 200.0, size=2)
        origin = rng.uniform(-500.0, 500.0, size=2)
        target = origin + rng.uniform(-500.0, 500.0, size=2)
        sol = solve_two_bone(origin, target, l1, l2)
        end = forward_positions(origin, (l1, l2), sol.angles)[-1]

        lo, hi = reach_band(l1, l2)
        reach = float(np.linalg.norm(end - origin))
        assert lo - 1e-3 <= reach <= hi + 1e-3

        dist = float(np.linalg.norm(target - origin))
        if lo <= dist <= hi and dist > EPS:
            np.testing.assert_allclose(end, target, atol=1e-3)


def test_one_bone_points_at_target():
    sol = solve_one_bone((1.0, 2.0), (4.0, 6.0), 10.0, 0.3)
    assert sol.angles[0] == math.atan2(4.0, 3.0)
    assert not sol.degenerate


def test_one_bone_target_at_origin_keeps_angle():
    sol = solve_one_bone((1.0, 2.0), (1.0, 2.0 + EPS / 2), 10.0, 0.3)
    assert sol.angles == (0.3,)
    assert sol.degenerate


def test_forward_positions_rejects_mismatch():
    with pytest.raises(ValueError):
        forward_positions((0.0, 0.0), (1.0, 2.0), (0.0,))
