"""
Navigator configuration.

Holds the noise model and numerical options of the inertial navigator.
The defaults reproduce the fixed constants of the reference filter:
Q = 0.01 * I(9), R = 0.1 * I(6), P0 = I(9).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import torch

from .exceptions import ConfigurationError


COVARIANCE_UPDATE_FORMS = ('simple', 'joseph')


@dataclass(frozen=True)
class NavigatorConfig:
    """Noise model and numerical options for :class:`InertialNavigator`."""
    process_noise: float = 0.01  # Q diagonal, all 9 state dimensions
    accel_noise: float = 0.1  # R diagonal, accelerometer rows
    gyro_noise: float = 0.1  # R diagonal, gyroscope rows
    initial_uncertainty: float = 1.0  # P0 diagonal
    gravity: float = 9.81
    covariance_update: str = 'simple'
    dtype: torch.dtype = torch.float64

    def __post_init__(self):
        for name in ('process_noise', 'accel_noise', 'gyro_noise', 'initial_uncertainty'):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ConfigurationError(f"{name} must be a finite, non-negative variance, got {value!r}")

        if not math.isfinite(self.gravity) or self.gravity <= 0:
            raise ConfigurationError(f"gravity must be positive, got {self.gravity!r}")

        if self.covariance_update not in COVARIANCE_UPDATE_FORMS:
            raise ConfigurationError(
                f"Unknown covariance update form: {self.covariance_update!r} "
                f"(expected one of {', '.join(COVARIANCE_UPDATE_FORMS)})")

        if not self.dtype.is_floating_point:
            raise ConfigurationError(f"dtype must be a floating point dtype, got {self.dtype}")


DEFAULT_NAVIGATOR_CONFIG = NavigatorConfig()


def validate_sampling_rate(sampling_rate: float) -> float:
    """Return the sampling rate as float, raising if it is not a positive finite number."""
    if isinstance(sampling_rate, bool):
        raise ConfigurationError(f"sampling_rate must be a number, got {sampling_rate!r}")
    try:
        rate = float(sampling_rate)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"sampling_rate must be a number, got {sampling_rate!r}") from exc

    if not math.isfinite(rate) or rate <= 0:
        raise ConfigurationError(f"sampling_rate must be > 0 Hz, got {sampling_rate!r}")

    return rate
