"""
Data preprocessing utilities for IMU samples.

Converts accelerometer and gyroscope readings into tensors the navigator can
consume, validates their shape, and rejects non-finite values before they
reach the filter.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np
import torch

from ..exceptions import ConfigurationError, NumericalError

logger = logging.getLogger(__name__)

# Plausibility limits for consumer-grade IMUs
MAX_ACCEL = 490.0  # 50g in m/s²
MAX_ANGULAR_RATE = 35.0  # rad/s

ACCEL_KEYS = ('ax', 'ay', 'az')
GYRO_KEYS = ('gx', 'gy', 'gz')

ArrayLike = Union[torch.Tensor, np.ndarray, Tuple[float, ...], list]


def as_vector3(value: ArrayLike,
               name: str,
               device: Union[str, torch.device] = 'cpu',
               dtype: torch.dtype = torch.float64) -> torch.Tensor:
    """
    Convert a 3-vector to a flat tensor.

    Args:
        value: Tensor, numpy array or sequence with exactly 3 elements
        name: Name used in error messages
        device: PyTorch device
        dtype: Target dtype

    Returns:
        Tensor of shape (3,)
    """
    try:
        vector = torch.as_tensor(value, dtype=dtype, device=torch.device(device))
    except (TypeError, ValueError, RuntimeError) as exc:
        raise ConfigurationError(f"{name} must be a numeric 3-vector, got {value!r}") from exc

    if vector.numel() != 3:
        raise ConfigurationError(f"{name} must have exactly 3 elements, got shape {tuple(vector.shape)}")

    return vector.reshape(3)


def check_finite(tensor: torch.Tensor, name: str):
    """Raise NumericalError if the tensor holds NaN or infinity."""
    finite = torch.isfinite(tensor)
    if not bool(finite.all()):
        logger.error("Rejected %s input with %d non-finite values", name, int((~finite).sum()))
        raise NumericalError(f"{name} contains non-finite values")


def _flag_outliers(accel: torch.Tensor, gyro: torch.Tensor):
    if bool((accel.abs() > MAX_ACCEL).any()):
        logger.warning("Accelerometer reading exceeds %.0f m/s²", MAX_ACCEL)
    if bool((gyro.abs() > MAX_ANGULAR_RATE).any()):
        logger.warning("Gyroscope reading exceeds %.0f rad/s", MAX_ANGULAR_RATE)


def split_imu_dict(imu_data: Dict[str, Any]) -> Tuple[List[float], List[float]]:
    """Split a dictionary with keys ax, ay, az, gx, gy, gz into accel and gyro lists."""
    missing = [key for key in ACCEL_KEYS + GYRO_KEYS if key not in imu_data]
    if missing:
        raise ConfigurationError(f"IMU sample is missing keys: {', '.join(missing)}")

    return [imu_data[k] for k in ACCEL_KEYS], [imu_data[k] for k in GYRO_KEYS]


def preprocess_imu_sample(accel: ArrayLike,
                          gyro: ArrayLike,
                          device: Union[str, torch.device] = 'cpu',
                          dtype: torch.dtype = torch.float64) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Preprocess one IMU sample.

    Args:
        accel: Accelerometer reading (m/s²)
        gyro: Gyroscope reading (rad/s)
        device: PyTorch device
        dtype: Target dtype

    Returns:
        Tuple of (accel, gyro) tensors of shape (3,)

    Raises:
        ConfigurationError: If a reading is not a 3-vector
        NumericalError: If a reading contains NaN or infinity
    """
    accel = as_vector3(accel, 'accel', device, dtype)
    gyro = as_vector3(gyro, 'gyro', device, dtype)

    check_finite(accel, 'accel')
    check_finite(gyro, 'gyro')
    _flag_outliers(accel, gyro)

    return accel, gyro


def preprocess_imu_stream(accel: ArrayLike,
                          gyro: ArrayLike,
                          device: Union[str, torch.device] = 'cpu',
                          dtype: torch.dtype = torch.float64,
                          sampling_rate: Optional[float] = None) -> Tuple[torch.Tensor, torch.Tensor]:
    """
    Preprocess a whole stream of IMU samples.

    Args:
        accel: Accelerometer samples, shape (N, 3)
        gyro: Gyroscope samples, shape (N, 3)
        device: PyTorch device
        dtype: Target dtype
        sampling_rate: Only used to report outlier times in the log

    Returns:
        Tuple of (accel, gyro) tensors of shape (N, 3)
    """
    try:
        accel = torch.as_tensor(accel, dtype=dtype, device=torch.device(device))
        gyro = torch.as_tensor(gyro, dtype=dtype, device=torch.device(device))
    except (TypeError, ValueError, RuntimeError) as exc:
        raise ConfigurationError("IMU stream must be numeric arrays of shape (N, 3)") from exc

    for name, data in (('accel', accel), ('gyro', gyro)):
        if data.dim() != 2 or data.shape[1] != 3:
            raise ConfigurationError(f"{name} stream must have shape (N, 3), got {tuple(data.shape)}")

    if accel.shape[0] != gyro.shape[0]:
        raise ConfigurationError(
            f"accel and gyro streams differ in length: {accel.shape[0]} vs {gyro.shape[0]}")

    check_finite(accel, 'accel')
    check_finite(gyro, 'gyro')

    outliers = (accel.abs() > MAX_ACCEL).any(dim=1) | (gyro.abs() > MAX_ANGULAR_RATE).any(dim=1)
    if bool(outliers.any()):
        indices = torch.nonzero(outliers).flatten().tolist()
        if sampling_rate:
            logger.warning("%d out-of-range IMU samples, first at t=%.3fs",
                           len(indices), indices[0] / sampling_rate)
        else:
            logger.warning("%d out-of-range IMU samples, first at index %d", len(indices), indices[0])

    return accel, gyro
