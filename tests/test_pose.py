"""Tests for SE3 poses and quaternion helpers."""

import numpy as np
import pytest

from euroc import SE3
from euroc.pose import quaternion_to_rotation, rotation_to_quaternion, slerp


class TestQuaternions:
    def test_identity(self):
        np.testing.assert_array_equal(quaternion_to_rotation([1.0, 0.0, 0.0, 0.0]), np.eye(3))

    def test_normalizes_input(self):
        np.testing.assert_allclose(quaternion_to_rotation([2.0, 0.0, 0.0, 0.0]), np.eye(3))

    def test_zero_quaternion_rejected(self):
        with pytest.raises(ValueError):
            quaternion_to_rotation([0.0, 0.0, 0.0, 0.0])

    @pytest.mark.parametrize(
        "q",
        [
            [0.535178, -0.152945, -0.826562, -0.083605],
            [0.0, 1.0, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ],
    )
    def test_rotation_to_quaternion_inverts(self, q):
        q = np.array(q) / np.linalg.norm(q)
        recovered = rotation_to_quaternion(quaternion_to_rotation(q))

        # q and -q encode the same rotation
        assert np.allclose(recovered, q, atol=1e-9) or np.allclose(recovered, -q, atol=1e-9)

    def test_slerp_endpoints(self):
        q0 = np.array([1.0, 0.0, 0.0, 0.0])
        q1 = np.array([np.cos(np.pi / 4), 0.0, 0.0, np.sin(np.pi / 4)])

        np.testing.assert_allclose(slerp(q0, q1, 0.0), q0, atol=1e-12)
        np.testing.assert_allclose(slerp(q0, q1, 1.0), q1, atol=1e-12)

    def test_slerp_takes_short_arc(self):
        q0 = np.array([1.0, 0.0, 0.0, 0.0])
        q1 = -np.array([np.cos(np.pi / 4), 0.0, 0.0, np.sin(np.pi / 4)])

        mid = slerp(q0, q1, 0.5)
        expected = np.array([np.cos(np.pi / 8), 0.0, 0.0, np.sin(np.pi / 8)])
        np.testing.assert_allclose(mid, expected, atol=1e-12)


class TestSE3:
    def test_rejects_bad_shapes(self):
        with pytest.raises(ValueError, match="Rotation must be 3x3"):
            SE3(rotation=np.eye(2), translation=np.zeros(3))
        with pytest.raises(ValueError, match="Translation must be"):
            SE3(rotation=np.eye(3), translation=np.zeros(4))

    def test_matrix_round_trip(self):
        T = np.eye(4)
        T[:3, 3] = [1.0, 2.0, 3.0]
        np.testing.assert_array_equal(SE3.from_matrix(T).to_matrix(), T)

    def test_inverse(self):
        pose = SE3.from_quaternion([0.535178, -0.152945, -0.826562, -0.083605], [4.7, -1.8, 0.8])
        assert (pose @ pose.inverse()).allclose(SE3.identity())

    def test_compose(self):
        shift = SE3(rotation=np.eye(3), translation=[1.0, 0.0, 0.0])
        turn = SE3.from_quaternion([np.cos(np.pi / 4), 0.0, 0.0, np.sin(np.pi / 4)], np.zeros(3))

        # Turn first, then the shift is applied in the turned frame
        composed = turn @ shift
        np.testing.assert_allclose(composed.translation, [0.0, 1.0, 0.0], atol=1e-12)

    def test_transform_points(self):
        pose = SE3(rotation=np.eye(3), translation=[1.0, 2.0, 3.0])
        points = pose.transform_points(np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]]))
        np.testing.assert_array_equal(points, [[1.0, 2.0, 3.0], [2.0, 3.0, 4.0]])

    def test_interpolate_midpoint(self):
        start = SE3.identity()
        end = SE3.from_quaternion([0.0, 0.0, 0.0, 1.0], [2.0, 0.0, 0.0])

        mid = start.interpolate(end, 0.5)
        np.testing.assert_allclose(mid.translation, [1.0, 0.0, 0.0])
        np.testing.assert_allclose(
            mid.to_quaternion(), [np.cos(np.pi / 4), 0.0, 0.0, np.sin(np.pi / 4)], atol=1e-12
        )

    def test_position_is_a_copy(self):
        pose = SE3.identity()
        pose.position[0] = 5.0
        assert pose.translation[0] == 0.0

    def test_interpolate_quarter_turn(self):
        start = SE3.identity()
        end = SE3.from_quaternion([np.cos(np.pi / 4), 0.0, 0.0, np.sin(np.pi / 4)], np.zeros(3))

        # A quarter of the way through a 90 degree yaw
        pose = start.interpolate(end, 0.25)
        expected = SE3.from_quaternion(
            [np.cos(np.pi / 16), 0.0, 0.0, np.sin(np.pi / 16)], np.zeros(3)
        )
        assert pose.allclose(expected, atol=1e-12)


class TestQuaternionConventions:
    """Quaternions are (w, x, y, z) with a non-negative scalar part."""

    def test_half_turn_has_zero_scalar(self):
        R = np.diag([1.0, -1.0, -1.0])
        q = rotation_to_quaternion(R)
        np.testing.assert_allclose(np.abs(q), [0.0, 1.0, 0.0, 0.0], atol=1e-12)

    def test_scalar_part_non_negative(self):
        q = np.array([-0.535178, 0.152945, 0.826562, 0.083605])
        recovered = rotation_to_quaternion(quaternion_to_rotation(q))

        assert recovered[0] >= 0.0
        np.testing.assert_allclose(recovered, -q / np.linalg.norm(q), atol=1e-9)

    def test_slerp_scalar_part_non_negative(self):
        q0 = np.array([0.0, 1.0, 0.0, 0.0])
        q1 = -np.array([np.cos(np.pi / 4), 0.0, 0.0, np.sin(np.pi / 4)])
        assert slerp(q0, q1, 0.3)[0] >= 0.0

    def test_to_quaternion_matches_ground_truth_row(self):
        # MH_01 ground truth orientation
        q = np.array([0.534108, -0.153029, -0.827383, -0.082152])
        q /= np.linalg.norm(q)
        pose = SE3.from_quaternion(q, np.zeros(3))
        np.testing.assert_allclose(pose.to_quaternion(), q, atol=1e-9)
