#!/usr/bin/env python3
"""
Simulated Data Testing Example

Runs the inertial navigator over several simulated scenarios and reports
drift, tracking error and real-time performance for each.
"""

import sys
import os
import logging
import numpy as np

# Add the parent directory to the Python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from inertial_nav import InertialNavigator, NavigatorConfig, NumericalError, process_imu_stream
from inertial_nav.utils.metrics import compute_rmse
from inertial_nav.utils.simulation import (
    generate_ground_truth_trajectory,
    generate_simulated_data,
)


SCENARIOS = {
    'static': {
        'description': 'Stationary sensor, gravity-compensated noise only',
        'scenario': 'static',
        'duration': 10.0,
        'sampling_rate': 100.0,
    },
    'circular': {
        'description': 'Circular motion at 0.5 Hz, radius 1 m',
        'scenario': 'circular',
        'duration': 10.0,
        'sampling_rate': 100.0,
    },
    'circular_joseph': {
        'description': 'Circular motion with Joseph-form covariance update',
        'scenario': 'circular',
        'duration': 10.0,
        'sampling_rate': 100.0,
        'config': NavigatorConfig(covariance_update='joseph'),
    },
    'high_rate': {
        'description': 'Circular motion sampled at 400 Hz',
        'scenario': 'circular',
        'duration': 5.0,
        'sampling_rate': 400.0,
    },
}


def run_scenario(name, params, seed=42):
    """Run one scenario and return its metrics."""
    print(f"\nTesting scenario: {name}")
    print(f"Description: {params['description']}")

    config = params.get('config') or NavigatorConfig()
    data = generate_simulated_data(duration=params['duration'],
                                   sampling_rate=params['sampling_rate'],
                                   scenario=params['scenario'],
                                   seed=seed,
                                   config=config)

    navigator = InertialNavigator(params['sampling_rate'], config=config)
    result = process_imu_stream(navigator, data['accel'], data['gyro'])
    estimate = result.to_dict()

    if params['scenario'] == 'circular':
        truth = generate_ground_truth_trajectory(params['duration'], params['sampling_rate'],
                                                 gravity=config.gravity)
        velocity_target = truth['accel'].numpy()
        orientation_target = truth['gyro'].numpy()
    else:
        velocity_target = np.zeros_like(estimate['velocity'])
        orientation_target = np.zeros_like(estimate['orientation'])

    metrics = {
        'velocity_rmse': float(compute_rmse(estimate['velocity'] - velocity_target)),
        'orientation_rmse': float(compute_rmse(estimate['orientation'] - orientation_target)),
        'final_position': estimate['position'][-1],
        'mean_latency_ms': result.mean_latency * 1e3,
        'max_latency_ms': result.max_latency * 1e3,
        'overruns': result.overruns,
        'samples': len(result),
    }

    print(f"  Processed {metrics['samples']} samples, "
          f"mean latency {metrics['mean_latency_ms']:.3f} ms, overruns {metrics['overruns']}")
    return metrics


def generate_test_report(all_metrics):
    """Print a summary table."""
    print(f"\n{'='*60}")
    print("SCENARIO REPORT")
    print('='*60)

    print(f"\n{'Scenario':<18} {'Vel RMS':<10} {'Ori RMS':<10} {'Max ms':<10} {'Overruns':<10}")
    print('-' * 60)
    for name, metrics in all_metrics.items():
        print(f"{name:<18} {metrics['velocity_rmse']:<10.3f} {metrics['orientation_rmse']:<10.3f} "
              f"{metrics['max_latency_ms']:<10.3f} {metrics['overruns']:<10d}")


def main():
    """Main function for scenario testing."""
    logging.basicConfig(level=logging.WARNING)
    print("PyTorch EKF Inertial Navigation - Scenario Testing")
    print("=" * 60)

    all_metrics = {}
    for name, params in SCENARIOS.items():
        try:
            all_metrics[name] = run_scenario(name, params)
        except NumericalError as e:
            print(f"  ERROR: {e}")

    generate_test_report(all_metrics)


if __name__ == '__main__':
    main()
