import math

import numpy as np

from houdini_livelink_python.utils.coord_utils import (
    IDENTITY_QUAT,
    convert_position,
    convert_rotation_from_euler,
    convert_rotation_from_quaternion,
    convert_scale,
    euler_to_quat,
    quat_to_euler,
)

C45 = math.cos(math.radians(45.0))
S45 = math.sin(math.radians(45.0))


def test_position_flips_y():
    np.testing.assert_array_equal(convert_position(1.0, 2.0, 3.0), [1.0, -2.0, 3.0])


def test_position_applies_unit_scale():
    np.testing.assert_allclose(convert_position(1.0, 2.0, 3.0, scale=100.0), [100.0, -200.0, 300.0])


def test_position_is_its_own_inverse():
    p = convert_position(*convert_position(0.5, -7.25, 3.0))
    np.testing.assert_array_equal(p, [0.5, -7.25, 3.0])


def test_scale_swaps_y_and_z_without_sign_flip():
    np.testing.assert_array_equal(convert_scale(1.0, 2.0, 3.0), [1.0, 3.0, 2.0])


def test_scale_is_its_own_inverse():
    s = convert_scale(*convert_scale(1.0, -2.0, 4.5))
    np.testing.assert_array_equal(s, [1.0, -2.0, 4.5])


def test_euler_zero_is_identity():
    np.testing.assert_allclose(euler_to_quat(0.0, 0.0, 0.0), IDENTITY_QUAT)


def test_euler_single_axes():
    np.testing.assert_allclose(euler_to_quat(90.0, 0.0, 0.0), [C45, -S45, 0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(euler_to_quat(0.0, 90.0, 0.0), [C45, 0.0, -S45, 0.0], atol=1e-12)
    np.testing.assert_allclose(euler_to_quat(0.0, 0.0, 90.0), [C45, 0.0, 0.0, S45], atol=1e-12)


def test_euler_unwinds_full_turns():
    np.testing.assert_allclose(euler_to_quat(370.0, -725.0, 30.0),
                               euler_to_quat(10.0, -5.0, 30.0), atol=1e-12)


def test_euler_result_is_unit_length():
    q = euler_to_quat(12.0, -47.0, 133.0)
    assert math.isclose(np.linalg.norm(q), 1.0, rel_tol=1e-12)


def test_euler_negates_y_and_z():
    np.testing.assert_allclose(convert_rotation_from_euler(5.0, 30.0, 40.0),
                               euler_to_quat(5.0, -30.0, -40.0))


def test_root_bone_gets_x_offset():
    np.testing.assert_allclose(convert_rotation_from_euler(0.0, 0.0, 0.0, is_root_bone=True),
                               [C45, -S45, 0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(convert_rotation_from_euler(10.0, 0.0, 0.0, is_root_bone=True),
                               euler_to_quat(100.0, 0.0, 0.0))


def test_non_root_bone_has_no_offset():
    root = convert_rotation_from_euler(10.0, 0.0, 0.0, is_root_bone=True)
    child = convert_rotation_from_euler(10.0, 0.0, 0.0, is_root_bone=False)
    np.testing.assert_allclose(child, euler_to_quat(10.0, 0.0, 0.0))
    assert not np.allclose(root, child)


def test_quaternion_mapping_is_literal():
    # Houdini (x, y, z, w) -> receiver X=x, Y=z, Z=y, W=-w, stored (w, x, y, z)
    np.testing.assert_array_equal(convert_rotation_from_quaternion(1.0, 2.0, 3.0, 4.0),
                                  [-4.0, 1.0, 3.0, 2.0])


def test_quat_to_euler():
    np.testing.assert_allclose(quat_to_euler(IDENTITY_QUAT), [0.0, 0.0, 0.0], atol=1e-9)
    np.testing.assert_allclose(quat_to_euler([C45, S45, 0.0, 0.0]), [90.0, 0.0, 0.0], atol=1e-9)
