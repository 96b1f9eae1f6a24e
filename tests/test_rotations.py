"""
Unit tests for inertial_nav/utils/rotations.py.

Run with: pytest tests/test_rotations.py -v
"""

import math
import unittest

import numpy as np
import torch

from inertial_nav import euler_to_quaternion
from inertial_nav.exceptions import ConfigurationError
from inertial_nav.utils.rotations import quaternion_to_euler


class TestEulerToQuaternion(unittest.TestCase):

    def test_identity(self) -> None:
        q = euler_to_quaternion([0.0, 0.0, 0.0])
        np.testing.assert_array_almost_equal(q.numpy(), [1.0, 0.0, 0.0, 0.0])

    def test_pure_yaw(self) -> None:
        """90° yaw rotates about z."""
        q = euler_to_quaternion([0.0, 0.0, math.pi / 2])
        s = math.sqrt(0.5)
        np.testing.assert_array_almost_equal(q.numpy(), [s, 0.0, 0.0, s])

    def test_pure_roll_and_pitch(self) -> None:
        roll = euler_to_quaternion([0.6, 0.0, 0.0])
        pitch = euler_to_quaternion([0.0, -0.4, 0.0])

        np.testing.assert_array_almost_equal(roll.numpy(), [math.cos(0.3), math.sin(0.3), 0.0, 0.0])
        np.testing.assert_array_almost_equal(pitch.numpy(), [math.cos(-0.2), 0.0, math.sin(-0.2), 0.0])

    def test_half_angle_composition(self) -> None:
        """Mixed angles follow the composition formula term by term."""
        roll, pitch, yaw = 0.3, -0.2, 1.1
        cr, sr = math.cos(roll / 2), math.sin(roll / 2)
        cp, sp = math.cos(pitch / 2), math.sin(pitch / 2)
        cy, sy = math.cos(yaw / 2), math.sin(yaw / 2)

        expected = [
            cr * cp * cy + sr * sp * sy,
            sr * cp * cy - cr * sp * sy,
            cr * sp * cy + sr * cp * sy,
            cr * cp * sy - sr * sp * cy,
        ]
        np.testing.assert_array_almost_equal(euler_to_quaternion((roll, pitch, yaw)).numpy(), expected)

    def test_unit_norm(self) -> None:
        rng = np.random.default_rng(0)
        for euler in rng.uniform(-math.pi, math.pi, size=(50, 3)):
            q = euler_to_quaternion(euler)
            self.assertAlmostEqual(float(torch.linalg.norm(q)), 1.0, places=12)

    def test_keeps_tensor_dtype(self) -> None:
        q = euler_to_quaternion(torch.tensor([0.1, 0.2, 0.3], dtype=torch.float32))
        self.assertEqual(q.dtype, torch.float32)
        self.assertEqual(tuple(q.shape), (4,))

    def test_wrong_length(self) -> None:
        with self.assertRaises(ConfigurationError):
            euler_to_quaternion([0.1, 0.2])

    def test_inverse_conversion(self) -> None:
        euler = [0.2, -0.5, 2.0]
        recovered = quaternion_to_euler(euler_to_quaternion(euler))
        np.testing.assert_array_almost_equal(recovered.numpy(), euler)


class TestQuaternionToEuler(unittest.TestCase):

    def test_unnormalized_input(self) -> None:
        q = 3.0 * euler_to_quaternion([0.1, 0.2, -0.3])
        np.testing.assert_array_almost_equal(quaternion_to_euler(q).numpy(), [0.1, 0.2, -0.3])

    def test_zero_quaternion_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            quaternion_to_euler([0.0, 0.0, 0.0, 0.0])

    def test_non_finite_quaternion_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            quaternion_to_euler([float('nan'), 0.0, 0.0, 1.0])

    def test_wrong_length(self) -> None:
        with self.assertRaises(ConfigurationError):
            quaternion_to_euler([1.0, 0.0, 0.0])

    def test_keeps_tensor_dtype(self) -> None:
        q = euler_to_quaternion(torch.tensor([0.1, 0.2, 0.3], dtype=torch.float32))
        euler = quaternion_to_euler(q)
        self.assertEqual(euler.dtype, torch.float32)
        self.assertEqual(euler.device, q.device)
        np.testing.assert_allclose(euler.numpy(), [0.1, 0.2, 0.3], atol=1e-5)

    def test_list_input_is_float64(self) -> None:
        self.assertEqual(quaternion_to_euler([1, 0, 0, 0]).dtype, torch.float64)
