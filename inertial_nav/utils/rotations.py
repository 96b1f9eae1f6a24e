"""
Attitude conversions for the navigator's orientation output.

The filter carries orientation as a small-angle roll/pitch/yaw proxy. These
helpers turn it into a unit quaternion for consumers that need a non-singular
attitude representation.
"""

from typing import Union

import numpy as np
import torch

from ..exceptions import ConfigurationError
from .preprocessing import as_vector3


def euler_to_quaternion(euler: Union[torch.Tensor, np.ndarray, list, tuple]) -> torch.Tensor:
    """
    Convert roll-pitch-yaw angles to a unit quaternion.

    Uses the half-angle composition (ZYX convention).

    Args:
        euler: (roll, pitch, yaw) in radians

    Returns:
        Quaternion tensor [w, x, y, z]
    """
    if isinstance(euler, torch.Tensor):
        euler = as_vector3(euler, 'euler', euler.device, euler.dtype if euler.is_floating_point() else torch.float64)
    else:
        euler = as_vector3(euler, 'euler')

    half = euler / 2.0
    cr, cp, cy = torch.cos(half)
    sr, sp, sy = torch.sin(half)

    return torch.stack([
        cr * cp * cy + sr * sp * sy,
        sr * cp * cy - cr * sp * sy,
        cr * sp * cy + sr * cp * sy,
        cr * cp * sy - sr * sp * cy,
    ])


def quaternion_to_euler(quaternion: Union[torch.Tensor, np.ndarray, list, tuple]) -> torch.Tensor:
    """
    Convert a quaternion [w, x, y, z] back to (roll, pitch, yaw) in radians.

    The quaternion is normalized first; pitch is clamped at ±90°. Floating
    point tensors keep their dtype and device.

    Raises:
        ConfigurationError: If the input is not a 4-vector with a finite, non-zero norm
    """
    if isinstance(quaternion, torch.Tensor) and quaternion.is_floating_point():
        q = quaternion
    else:
        q = torch.as_tensor(quaternion, dtype=torch.float64)
    if q.numel() != 4:
        raise ConfigurationError(f"quaternion must have exactly 4 elements, got shape {tuple(q.shape)}")

    q = q.reshape(4)
    norm = torch.linalg.norm(q)
    if not bool(torch.isfinite(norm)) or float(norm) == 0.0:
        raise ConfigurationError(f"quaternion must have a finite non-zero norm, got {q.tolist()}")
    w, x, y, z = torch.unbind(q / norm)

    roll = torch.atan2(2.0 * (w * x + y * z), 1.0 - 2.0 * (x * x + y * y))
    pitch = torch.asin(torch.clamp(2.0 * (w * y - z * x), -1.0, 1.0))
    yaw = torch.atan2(2.0 * (w * z + x * y), 1.0 - 2.0 * (y * y + z * z))

    return torch.stack([roll, pitch, yaw])
