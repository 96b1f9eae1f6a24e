"""Utility functions for preprocessing, simulation, rotations and metrics."""

from .preprocessing import preprocess_imu_sample, preprocess_imu_stream
from .rotations import euler_to_quaternion, quaternion_to_euler
from .simulation import generate_ground_truth_trajectory, generate_simulated_data, simulate_imu_data
from .metrics import check_accuracy, compute_error_stats, compute_rmse

__all__ = [
    'preprocess_imu_sample', 'preprocess_imu_stream',
    'euler_to_quaternion', 'quaternion_to_euler',
    'generate_ground_truth_trajectory', 'generate_simulated_data', 'simulate_imu_data',
    'check_accuracy', 'compute_error_stats', 'compute_rmse',
]
