"""
PyTorch Extended Kalman Filter for Inertial Navigation

Fuses accelerometer and gyroscope samples into a running estimate of:
- position (m, world frame)
- velocity (m/s, world frame)
- orientation (small-angle roll/pitch/yaw proxy, rad)

Each sample runs a predict step followed by an update step. The filter runs
on CPU or GPU through PyTorch.
"""

__version__ = "1.0.0"

from .config import DEFAULT_NAVIGATOR_CONFIG, NavigatorConfig
from .core.navigator import InertialNavigator
from .exceptions import ConfigurationError, NavigationError, NumericalError
from .navigation import NavigationResult, process_imu_stream
from .sensors.imu import IMUSample
from .utils.rotations import euler_to_quaternion
from .utils.simulation import simulate_imu_data

__all__ = [
    'InertialNavigator', 'NavigatorConfig', 'DEFAULT_NAVIGATOR_CONFIG',
    'NavigationError', 'ConfigurationError', 'NumericalError',
    'NavigationResult', 'process_imu_stream',
    'IMUSample', 'euler_to_quaternion', 'simulate_imu_data',
]
