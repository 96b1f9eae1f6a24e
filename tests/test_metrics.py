"""
Unit tests for inertial_nav/utils/metrics.py.

Run with: pytest tests/test_metrics.py -v
"""

import math
import unittest

import numpy as np
import torch

from inertial_nav.exceptions import ConfigurationError
from inertial_nav.utils.metrics import check_accuracy, compute_error_stats, compute_rmse


class TestComputeRMSE(unittest.TestCase):

    def test_scalar(self) -> None:
        self.assertAlmostEqual(compute_rmse(np.array([3.0, -4.0])), math.sqrt(12.5))

    def test_per_axis(self) -> None:
        errors = np.array([[1.0, 0.0], [1.0, 2.0]])
        np.testing.assert_array_almost_equal(compute_rmse(errors, axis=0), [1.0, math.sqrt(2.0)])

    def test_accepts_tensor(self) -> None:
        self.assertAlmostEqual(compute_rmse(torch.ones(4, 3)), 1.0)


class TestErrorStats(unittest.TestCase):

    def test_vector_norms(self) -> None:
        stats = compute_error_stats(np.array([[3.0, 4.0, 0.0], [0.0, 0.0, 1.0]]))
        self.assertAlmostEqual(stats['mean'], 3.0)
        self.assertAlmostEqual(stats['max'], 5.0)
        self.assertAlmostEqual(stats['rmse'], math.sqrt(13.0))
        self.assertEqual(stats['count'], 2)

    def test_empty_input_rejected(self) -> None:
        for errors in (np.zeros((0, 3)), np.array([]), torch.zeros(0, 3)):
            with self.assertRaises(ConfigurationError):
                compute_error_stats(errors)


class TestCheckAccuracy(unittest.TestCase):

    def setUp(self) -> None:
        self.reference = {'position': np.zeros((100, 3)), 'orientation': np.zeros((100, 3))}

    def test_within_tolerance(self) -> None:
        estimate = {'position': np.full((100, 3), 0.05), 'orientation': np.full((100, 3), math.radians(2))}
        report = check_accuracy(estimate, self.reference)
        self.assertTrue(report['passed'])

    def test_position_over_10cm(self) -> None:
        estimate = {'position': np.full((100, 3), 0.2), 'orientation': np.zeros((100, 3))}
        report = check_accuracy(estimate, self.reference)
        self.assertFalse(report['position_ok'])
        self.assertTrue(report['orientation_ok'])
        self.assertFalse(report['passed'])

    def test_orientation_over_5_degrees(self) -> None:
        estimate = {'position': np.zeros((100, 3)), 'orientation': np.full((100, 3), math.radians(6))}
        self.assertFalse(check_accuracy(estimate, self.reference)['orientation_ok'])
