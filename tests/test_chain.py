import math

import numpy as np
import pytest

from rigging.bone import Bone
from rigging.chain import MAX_BONES, Chain


def _two_bone_chain(origin=(0.0, 0.0), l1=100.0, l2=80.0):
    chain = Chain(origin)
    assert chain.add_bone(l1, 0.5)
    assert chain.add_bone(l2, 1.0)
    return chain


def _assert_propagated(chain):
    bones = chain.bones
    if not bones:
        return
    np.testing.assert_array_equal(bones[0].start, chain.origin)
    for prev, cur in zip(bones[:-1], bones[1:]):
        np.testing.assert_array_equal(cur.start, prev.end())


def test_bone_end():
    bone = Bone((1.0, 2.0), 10.0, math.pi / 2)
    np.testing.assert_allclose(bone.end(), [1.0, 12.0], atol=1e-12)


def test_bone_rejects_bad_point():
    with pytest.raises(ValueError):
        Bone((1.0, 2.0, 3.0), 1.0, 0.0)


def test_empty_chain():
    chain = Chain((3.0, 4.0))
    assert chain.bone_count == 0
    np.testing.assert_array_equal(chain.end_effector(), [3.0, 4.0])
    assert chain.max_reach() == 0.0
    assert chain.update((10.0, 10.0)) is None
    np.testing.assert_array_equal(chain.origin, [3.0, 4.0])


def test_default_origin_is_zero():
    np.testing.assert_array_equal(Chain().origin, [0.0, 0.0])


def test_add_bone_starts_at_end_effector():
    chain = Chain((0.0, 0.0))
    chain.add_bone(100.0, 0.0)
    chain.add_bone(80.0, math.pi / 2)
    np.testing.assert_allclose(chain.bones[1].start, [100.0, 0.0])
    _assert_propagated(chain)


def test_add_bone_cap_and_invalid_length():
    chain = _two_bone_chain()
    before = [(b.length, b.angle) for b in chain.bones]
    assert chain.add_bone(50.0, 0.0) is False
    assert chain.bone_count == MAX_BONES
    assert [(b.length, b.angle) for b in chain.bones] == before

    chain = Chain()
    assert chain.add_bone(0.0, 0.0) is False
    assert chain.add_bone(-5.0, 0.0) is False
    assert chain.bone_count == 0


def test_reach_queries():
    chain = _two_bone_chain()
    assert chain.max_reach() == 180.0
    assert chain.min_reach() == 20.0
    assert chain.can_reach((100.0, 0.0))
    assert not chain.can_reach((10.0, 0.0))
    assert not chain.can_reach((0.0, 200.0))


def test_update_reachable_scenario():
    chain = _two_bone_chain()
    sol = chain.update((120.0, 0.0))
    assert sol is not None and sol.reached
    a1, a2 = chain.angles()
    assert a1 == pytest.approx(-0.7227, abs=1e-4)
    assert a2 == pytest.approx(0.974, abs=1e-3)
    np.testing.assert_allclose(chain.end_effector(), [120.0, 0.0], atol=1e-6)
    _assert_propagated(chain)


def test_update_unreachable_scenario():
    chain = _two_bone_chain()
    chain.update((300.0, 0.0))
    a1, a2 = chain.angles()
    assert a1 == pytest.approx(0.0, abs=1e-12)
    assert a2 == pytest.approx(0.0, abs=1e-12)
    np.testing.assert_allclose(chain.end_effector(), [180.0, 0.0], atol=1e-9)


def test_update_degenerate_equal_lengths():
    chain = _two_bone_chain(origin=(5.0, 5.0), l1=60.0, l2=60.0)
    chain.update((5.0, 5.0))
    assert chain.angles() == [0.0, math.pi]
    _assert_propagated(chain)


def test_forward_kinematics_consistency():
    rng = np.random.default_rng(7)
    chain = _two_bone_chain(origin=(40.0, -20.0), l1=70.0, l2=55.0)
    for _ in range(100):
        chain.update(rng.uniform(-300.0, 300.0, size=2))
        start = chain.origin
        for bone in chain.bones:
            end = start + bone.length * np.array(
                [np.cos(bone.angle), np.sin(bone.angle)], dtype=np.float64
            )
            np.testing.assert_array_equal(bone.start, start)
            np.testing.assert_array_equal(bone.end(), end)
            start = end


def test_reachability_invariant_through_chain():
    rng = np.random.default_rng(99)
    for _ in range(200):
        l1, l2 = rng.uniform(5.0, 150.0, size=2)
        chain = Chain(rng.uniform(-100.0, 100.0, size=2))
        chain.add_bone(l1, 0.0)
        chain.add_bone(l2, 0.0)
        target = rng.uniform(-400.0, 400.0, size=2)
        chain.update(target)

        reach = float(np.linalg.norm(chain.end_effector() - chain.origin))
        assert abs(l1 - l2) - 1e-3 <= reach <= l1 + l2 + 1e-3

        dist = float(np.linalg.norm(target - chain.origin))
        if abs(l1 - l2) <= dist <= l1 + l2:
            assert reach == pytest.approx(dist, abs=1e-3)


def test_update_is_idempotent():
    chain = _two_bone_chain()
    chain.update((37.0, 91.0))
    first = chain.angles()
    chain.update((37.0, 91.0))
    assert chain.angles() == first


def test_one_bone_update():
    chain = Chain((10.0, 10.0))
    chain.add_bone(50.0, 0.0)
    chain.update((10.0, 60.0))
    assert chain.angles()[0] == math.atan2(50.0, 0.0)
    np.testing.assert_array_equal(chain.bones[0].start, [10.0, 10.0])

    # target on the origin leaves the angle alone
    chain.update((10.0, 10.0))
    assert chain.angles()[0] == math.atan2(50.0, 0.0)


def test_set_origin_keeps_angles_and_lengths():
    chain = _two_bone_chain()
    chain.update((60.0, 90.0))
    lengths, angles = chain.lengths(), chain.angles()
    offset = chain.end_effector() - chain.origin

    chain.set_origin((250.0, -40.0))
    assert chain.lengths() == lengths
    assert chain.angles() == angles
    np.testing.assert_array_equal(chain.origin, [250.0, -40.0])
    np.testing.assert_allclose(chain.end_effector() - chain.origin, offset, atol=1e-9)
    _assert_propagated(chain)


def test_set_origin_on_empty_chain():
    chain = Chain()
    chain.set_origin((1.0, 2.0))
    np.testing.assert_array_equal(chain.end_effector(), [1.0, 2.0])


def test_set_angles():
    chain = _two_bone_chain()
    chain.set_angles([0.0, math.pi / 2])
    np.testing.assert_allclose(chain.end_effector(), [100.0, 80.0], atol=1e-9)
    with pytest.raises(ValueError):
        chain.set_angles([0.0])


def test_joints_are_index_pairs():
    chain = _two_bone_chain()
    joints = chain.joints()
    assert len(joints) == 1
    joint = joints[0]
    assert (joint.parent, joint.child) == (0, 1)
    parent, child = joint.resolve(chain)
    assert parent is chain.bones[0] and child is chain.bones[1]
    np.testing.assert_array_equal(joint.position(chain), chain.bones[1].start)
    assert joint.relative_angle(chain) == pytest.approx(1.0 - 0.5)

    single = Chain()
    single.add_bone(10.0)
    assert single.joints() == []
