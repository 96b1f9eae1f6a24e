"""
IMU (Inertial Measurement Unit) Sensor integration module.

Handles accelerometer and gyroscope samples and turns them into the
measurement vector, observation matrix and noise covariance used by the
navigator's update step.

Observation model: the accelerometer rows observe the velocity block and the
gyroscope rows observe the orientation block directly. This is a simplified
placeholder rather than a strapdown mechanization (no gravity compensation,
no body-to-world rotation) and is kept for compatibility with the reference
filter.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np
import torch

from ..utils.preprocessing import preprocess_imu_sample, split_imu_dict

STATE_DIM = 9
MEASUREMENT_DIM = 6

# State layout: [x, y, z, vx, vy, vz, roll, pitch, yaw]
POSITION = slice(0, 3)
VELOCITY = slice(3, 6)
ORIENTATION = slice(6, 9)

# Measurement layout: [ax, ay, az, gx, gy, gz]
ACCEL_ROWS = slice(0, 3)
GYRO_ROWS = slice(3, 6)


@dataclass
class IMUSample:
    """One synchronized accelerometer/gyroscope reading."""

    accel: Any  # [x, y, z] in m/s²
    gyro: Any  # [x, y, z] in rad/s
    timestamp: Optional[float] = None

    def __post_init__(self):
        self.accel = np.asarray(self.accel, dtype=np.float64)
        self.gyro = np.asarray(self.gyro, dtype=np.float64)


@dataclass
class Measurement:
    """Measurement triple consumed by the update step."""

    z: torch.Tensor  # (6, 1)
    H: torch.Tensor  # (6, 9)
    R: torch.Tensor  # (6, 6)
    accel: torch.Tensor = field(repr=False, default=None)
    gyro: torch.Tensor = field(repr=False, default=None)


class IMUSensor:
    """IMU sensor integration for the inertial navigator."""

    def __init__(self,
                 accel_noise: float = 0.1,
                 gyro_noise: float = 0.1,
                 device: Union[str, torch.device] = 'cpu',
                 dtype: torch.dtype = torch.float64):
        """
        Initialize IMU sensor.

        Args:
            accel_noise: Variance of accelerometer measurements
            gyro_noise: Variance of gyroscope measurements
            device: PyTorch device
            dtype: Tensor dtype
        """
        self.accel_noise = accel_noise
        self.gyro_noise = gyro_noise
        self.dtype = dtype
        self.device = torch.device(device)

        self.observation_matrix = self._build_observation_matrix()
        self.measurement_noise = self._build_measurement_noise()

    def _build_observation_matrix(self) -> torch.Tensor:
        H = torch.zeros(MEASUREMENT_DIM, STATE_DIM, dtype=self.dtype, device=self.device)
        H[ACCEL_ROWS, VELOCITY] = torch.eye(3, dtype=self.dtype, device=self.device)
        H[GYRO_ROWS, ORIENTATION] = torch.eye(3, dtype=self.dtype, device=self.device)
        return H

    def _build_measurement_noise(self) -> torch.Tensor:
        variances = [self.accel_noise] * 3 + [self.gyro_noise] * 3
        return torch.diag(torch.tensor(variances, dtype=self.dtype, device=self.device))

    def read_sample(self, accel: Any, gyro: Any = None) -> Tuple[torch.Tensor, torch.Tensor]:
        """
        Normalize the accepted sample formats into (accel, gyro) tensors.

        Accepts an ``IMUSample``, a dict with keys ax..gz, or two 3-vectors.
        """
        if isinstance(accel, IMUSample):
            accel, gyro = accel.accel, accel.gyro
        elif isinstance(accel, dict):
            accel, gyro = split_imu_dict(accel)

        return preprocess_imu_sample(accel, gyro, self.device, self.dtype)

    def process_imu_data(self, accel: Any, gyro: Any = None) -> Measurement:
        """
        Process combined IMU data (accelerometer + gyroscope).

        Returns:
            Measurement with z = [accel; gyro], the fixed observation matrix and
            the measurement noise covariance
        """
        accel, gyro = self.read_sample(accel, gyro)
        z = torch.cat([accel, gyro]).unsqueeze(1)
        return Measurement(z=z, H=self.observation_matrix, R=self.measurement_noise,
                           accel=accel, gyro=gyro)

    def to(self, device: Union[str, torch.device]):
        """Move sensor matrices to the specified device."""
        self.device = torch.device(device)
        self.observation_matrix = self.observation_matrix.to(self.device)
        self.measurement_noise = self.measurement_noise.to(self.device)
        return self

    def get_measurement_info(self) -> Dict[str, Any]:
        """Get information about IMU measurements."""
        return {
            'sensor_type': 'IMU',
            'measurements': ['accel_x', 'accel_y', 'accel_z', 'gyro_x', 'gyro_y', 'gyro_z'],
            'observes': {'accelerometer': 'velocity', 'gyroscope': 'orientation'},
            'noise_variance': {
                'accelerometer': self.accel_noise,
                'gyroscope': self.gyro_noise
            }
        }
