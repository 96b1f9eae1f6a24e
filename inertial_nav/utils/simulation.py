"""
Simulation utilities for generating synthetic IMU data.

Creates accelerometer/gyroscope streams with known ground truth for testing
and demonstrating the inertial navigator.
"""

import math
from typing import Dict, Optional, Tuple, Union

import torch

from ..config import NavigatorConfig, validate_sampling_rate
from ..exceptions import ConfigurationError

DEFAULT_OMEGA = 2 * math.pi * 0.5  # 0.5 Hz rotation
DEFAULT_RADIUS = 1.0
DEFAULT_NOISE_STD = 0.1
GRAVITY = 9.81


def _sample_times(duration: float, sampling_rate: float, device, dtype) -> torch.Tensor:
    sampling_rate = validate_sampling_rate(sampling_rate)
    if not math.isfinite(duration) or duration <= 0:
        raise ConfigurationError(f"duration must be > 0 seconds, got {duration!r}")

    n = int(round(duration * sampling_rate))
    if n < 1:
        raise ConfigurationError(
            f"duration {duration}s at {sampling_rate} Hz yields no samples")

    return torch.arange(n, dtype=dtype, device=torch.device(device)) / sampling_rate


def _make_generator(generator: Optional[torch.Generator], seed: Optional[int]) -> Optional[torch.Generator]:
    if generator is None and seed is not None:
        generator = torch.Generator()
        generator.manual_seed(seed)
    return generator


def _gaussian_noise(shape, noise_std: float, generator, device, dtype) -> torch.Tensor:
    # Noise is drawn on the CPU so a seed gives the same stream on every device
    noise = torch.randn(shape, generator=generator, dtype=dtype)
    return (noise * noise_std).to(torch.device(device))


def simulate_imu_data(duration: float,
                      sampling_rate: float,
                      omega: float = DEFAULT_OMEGA,
                      radius: float = DEFAULT_RADIUS,
                      noise_std: float = DEFAULT_NOISE_STD,
                      gravity: float = GRAVITY,
                      add_noise: bool = True,
                      generator: Optional[torch.Generator] = None,
                      seed: Optional[int] = None,
                      device: Union[str, torch.device] = 'cpu',
                      dtype: torch.dtype = torch.float64) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Generate IMU data for a sensor moving on a horizontal circle.

    Args:
        duration: Simulation duration in seconds
        sampling_rate: Sampling rate in Hz
        omega: Angular rate of the circular motion (rad/s)
        radius: Circle radius in meters
        noise_std: Standard deviation of the additive Gaussian noise
        gravity: Constant reading on the z accelerometer axis
        add_noise: Whether to add sensor noise
        generator: Random generator for the noise
        seed: Seed used to create a generator when none is given
        device: PyTorch device
        dtype: Tensor dtype

    Returns:
        Tuple of (accel, gyro), each of shape (N, 3), N = round(duration * sampling_rate)
    """
    t = _sample_times(duration, sampling_rate, device, dtype)
    n = t.shape[0]

    # Centripetal acceleration plus gravity on z
    accel = torch.stack([
        -radius * omega ** 2 * torch.cos(omega * t),
        -radius * omega ** 2 * torch.sin(omega * t),
        torch.full_like(t, gravity),
    ], dim=1)

    # Constant yaw rate
    gyro = torch.zeros(n, 3, dtype=dtype, device=t.device)
    gyro[:, 2] = omega

    if add_noise and noise_std > 0:
        generator = _make_generator(generator, seed)
        accel = accel + _gaussian_noise((n, 3), noise_std, generator, t.device, dtype)
        gyro = gyro + _gaussian_noise((n, 3), noise_std, generator, t.device, dtype)

    return accel, gyro


def simulate_static_imu_data(duration: float,
                             sampling_rate: float,
                             noise_std: float = 0.0,
                             generator: Optional[torch.Generator] = None,
                             seed: Optional[int] = None,
                             device: Union[str, torch.device] = 'cpu',
                             dtype: torch.dtype = torch.float64) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Generate IMU data for a stationary sensor.

    The accelerometer stream is gravity-compensated, so without noise both
    streams are all zeros.
    """
    t = _sample_times(duration, sampling_rate, device, dtype)
    n = t.shape[0]

    accel = torch.zeros(n, 3, dtype=dtype, device=t.device)
    gyro = torch.zeros(n, 3, dtype=dtype, device=t.device)

    if noise_std > 0:
        generator = _make_generator(generator, seed)
        accel = accel + _gaussian_noise((n, 3), noise_std, generator, t.device, dtype)
        gyro = gyro + _gaussian_noise((n, 3), noise_std, generator, t.device, dtype)

    return accel, gyro


def generate_ground_truth_trajectory(duration: float,
                                     sampling_rate: float,
                                     omega: float = DEFAULT_OMEGA,
                                     radius: float = DEFAULT_RADIUS,
                                     gravity: float = GRAVITY,
                                     device: Union[str, torch.device] = 'cpu',
                                     dtype: torch.dtype = torch.float64) -> Dict[str, torch.Tensor]:
    """
    Analytic trajectory matching :func:`simulate_imu_data`.

    Returns:
        Dictionary with 'time' (N,), and 'position', 'velocity', 'orientation',
        'accel', 'gyro' (N, 3). 'accel' and 'gyro' are the noise-free sensor
        readings; yaw grows as omega * t.
    """
    t = _sample_times(duration, sampling_rate, device, dtype)
    zeros = torch.zeros_like(t)
    cos_wt = torch.cos(omega * t)
    sin_wt = torch.sin(omega * t)

    return {
        'time': t,
        'position': torch.stack([radius * cos_wt, radius * sin_wt, zeros], dim=1),
        'velocity': torch.stack([-radius * omega * sin_wt, radius * omega * cos_wt, zeros], dim=1),
        'orientation': torch.stack([zeros, zeros, omega * t], dim=1),
        'accel': torch.stack([-radius * omega ** 2 * cos_wt,
                              -radius * omega ** 2 * sin_wt,
                              torch.full_like(t, gravity)], dim=1),
        'gyro': torch.stack([zeros, zeros, torch.full_like(t, omega)], dim=1),
    }


def generate_simulated_data(duration: float = 10.0,
                            sampling_rate: float = 100.0,
                            scenario: str = 'circular',
                            add_noise: bool = True,
                            seed: Optional[int] = None,
                            device: Union[str, torch.device] = 'cpu',
                            gravity: float = GRAVITY,
                            config: Optional[NavigatorConfig] = None) -> Dict[str, torch.Tensor]:
    """
    Generate simulated IMU data for a named scenario.

    Args:
        duration: Simulation duration in seconds
        sampling_rate: Sampling rate in Hz
        scenario: 'circular' or 'static'
        add_noise: Whether to add sensor noise
        seed: Noise seed
        device: PyTorch device
        gravity: Gravity reading on the z accelerometer axis of the circular scenario
        config: Navigator configuration; its gravity overrides ``gravity`` when given

    Returns:
        Dictionary with 'accel' and 'gyro' streams of shape (N, 3)
    """
    if config is not None:
        gravity = config.gravity

    if scenario == 'circular':
        accel, gyro = simulate_imu_data(duration, sampling_rate, gravity=gravity, add_noise=add_noise,
                                        seed=seed, device=device)
    elif scenario == 'static':
        noise_std = DEFAULT_NOISE_STD if add_noise else 0.0
        accel, gyro = simulate_static_imu_data(duration, sampling_rate, noise_std=noise_std,
                                               seed=seed, device=device)
    else:
        raise ConfigurationError(f"Unknown scenario: {scenario}")

    return {'accel': accel, 'gyro': gyro}
