"""
PyTorch-based Extended Kalman Filter for inertial navigation.

This module fuses accelerometer and gyroscope samples into a running estimate
of position, velocity and orientation. Every sample runs a predict step
(sample used as control input) followed by an update step (same sample used
as a noisy measurement).

Model limitations, kept for compatibility with the reference filter:
- the raw accelerometer reading is injected into velocity without gravity
  compensation or rotation into the world frame;
- the accelerometer is treated as a direct observation of velocity and the
  gyroscope as a direct observation of orientation;
- orientation is a small-angle roll/pitch/yaw proxy.

The navigator is not thread-safe: state and covariance are mutated in place,
so calls must be serialized by the caller.
"""

import logging
from typing import Any, Dict, Optional, Tuple, Union

import torch
import torch.nn as nn

from ..config import DEFAULT_NAVIGATOR_CONFIG, NavigatorConfig, validate_sampling_rate
from ..exceptions import NumericalError
from ..sensors.imu import IMUSensor, Measurement, ORIENTATION, POSITION, STATE_DIM, VELOCITY
from ..utils.preprocessing import as_vector3, check_finite
from ..utils.rotations import euler_to_quaternion

logger = logging.getLogger(__name__)


class InertialNavigator(nn.Module):
    """
    EKF inertial navigator.

    State vector (9 dimensions):
    [x, y, z, vx, vy, vz, roll, pitch, yaw]

    Where:
    - x, y, z: position in meters (world frame)
    - vx, vy, vz: velocity in m/s (world frame)
    - roll, pitch, yaw: small-angle orientation proxy in radians
    """

    def __init__(self,
                 sampling_rate: float,
                 config: Optional[NavigatorConfig] = None,
                 device: Union[str, torch.device] = 'cpu'):
        """
        Initialize the navigator.

        Args:
            sampling_rate: Fixed IMU sampling rate in Hz, must be > 0
            config: Noise model and numerical options
            device: PyTorch device ('cpu' or 'cuda')

        Raises:
            ConfigurationError: If the sampling rate is not a positive number
        """
        super(InertialNavigator, self).__init__()

        self.sampling_rate = validate_sampling_rate(sampling_rate)
        self.dt = 1.0 / self.sampling_rate
        self.config = config or DEFAULT_NAVIGATOR_CONFIG
        self.dtype = self.config.dtype
        self.device = torch.device(device)
        self.state_dim = STATE_DIM

        self.state = torch.zeros(self.state_dim, 1, dtype=self.dtype, device=self.device)

        # Error covariance
        self.P = torch.eye(self.state_dim, dtype=self.dtype, device=self.device) * self.config.initial_uncertainty

        # Process noise covariance
        self.Q = torch.eye(self.state_dim, dtype=self.dtype, device=self.device) * self.config.process_noise

        # State transition: position advances by velocity * dt
        self.F = torch.eye(self.state_dim, dtype=self.dtype, device=self.device)
        self.F[POSITION, VELOCITY] = torch.eye(3, dtype=self.dtype, device=self.device) * self.dt

        self.imu_sensor = IMUSensor(accel_noise=self.config.accel_noise,
                                    gyro_noise=self.config.gyro_noise,
                                    device=self.device,
                                    dtype=self.dtype)

        self.sample_count = 0
        self.failed = False

        logger.debug("InertialNavigator created: rate=%.1f Hz, dt=%.4f s, Q=%g, R=(%g, %g), update=%s",
                     self.sampling_rate, self.dt, self.config.process_noise,
                     self.config.accel_noise, self.config.gyro_noise, self.config.covariance_update)

    @property
    def R(self) -> torch.Tensor:
        """Measurement noise covariance (6x6)."""
        return self.imu_sensor.measurement_noise

    @property
    def H(self) -> torch.Tensor:
        """Observation matrix (6x9)."""
        return self.imu_sensor.observation_matrix

    def process_sample(self, accel: Any, gyro: Any = None) -> Tuple[torch.Tensor, torch.Tensor, torch.Tensor]:
        """
        Run one predict + update cycle.

        Args:
            accel: Accelerometer reading (m/s²), or an IMUSample / dict holding both readings
            gyro: Gyroscope reading (rad/s)

        Returns:
            Tuple of (orientation, velocity, position), each a tensor of shape (3,)

        Raises:
            NumericalError: For non-finite input, a singular innovation
                covariance, or a non-finite result. The navigator is unusable afterwards.
        """
        self._check_usable()
        try:
            measurement = self.imu_sensor.process_imu_data(accel, gyro)
        except NumericalError:
            self.failed = True
            raise

        self.predict(measurement.accel)
        self.update(measurement)
        self.sample_count += 1

        return self.get_orientation(), self.get_velocity(), self.get_position()

    def predict(self, accel: Any) -> torch.Tensor:
        """
        Prediction step.

        Args:
            accel: Accelerometer reading used as control input, shape (3,)

        Returns:
            Predicted state vector
        """
        self._check_usable()
        accel = as_vector3(accel, 'accel', self.device, self.dtype)
        try:
            check_finite(accel, 'accel')
        except NumericalError:
            self.failed = True
            raise
        accel = accel.reshape(3, 1)

        # Predict state: x_k = F * x_k-1, then integrate acceleration into velocity
        self.state = torch.matmul(self.F, self.state)
        self.state[VELOCITY] += accel * self.dt

        # Predict covariance: P_k = F * P_k-1 * F^T + Q
        self.P = torch.matmul(torch.matmul(self.F, self.P), self.F.T) + self.Q

        return self.state.clone()

    def update(self, measurement: Union[Measurement, Any], gyro: Any = None) -> torch.Tensor:
        """
        Update step.

        Args:
            measurement: Measurement from IMUSensor, or the accelerometer reading
            gyro: Gyroscope reading when ``measurement`` is a raw accelerometer reading

        Returns:
            Updated state vector
        """
        self._check_usable()
        if not isinstance(measurement, Measurement):
            try:
                measurement = self.imu_sensor.process_imu_data(measurement, gyro)
            except NumericalError:
                self.failed = True
                raise

        H = measurement.H
        R = measurement.R
        z = measurement.z

        # Innovation: y = z - H * x
        innovation = z - torch.matmul(H, self.state)

        # Innovation covariance: S = H * P * H^T + R
        S = torch.matmul(torch.matmul(H, self.P), H.T) + R

        # Kalman gain: K = P * H^T * S^-1, via S^T K^T = H P^T
        try:
            K = torch.linalg.solve(S.T, torch.matmul(H, self.P.T)).T
        except RuntimeError as exc:
            self._fail("Singular innovation covariance at sample %d" % self.sample_count, exc)

        if not bool(torch.isfinite(K).all()):
            self._fail("Non-finite Kalman gain at sample %d" % self.sample_count)

        # Update state: x = x + K * y
        self.state = self.state + torch.matmul(K, innovation)

        # Update covariance
        I = torch.eye(self.state_dim, dtype=self.dtype, device=self.device)
        I_KH = I - torch.matmul(K, H)
        if self.config.covariance_update == 'joseph':
            self.P = (torch.matmul(torch.matmul(I_KH, self.P), I_KH.T)
                      + torch.matmul(torch.matmul(K, R), K.T))
        else:
            self.P = torch.matmul(I_KH, self.P)
        self.P = 0.5 * (self.P + self.P.T)

        if not (bool(torch.isfinite(self.state).all()) and bool(torch.isfinite(self.P).all())):
            self._fail("Non-finite state or covariance at sample %d" % self.sample_count)

        return self.state.clone()

    def _check_usable(self):
        if self.failed:
            raise NumericalError("Navigator failed on an earlier sample; construct a new one to recover")

    def _fail(self, message: str, cause: Optional[BaseException] = None):
        self.failed = True
        logger.error(message)
        if cause is not None:
            raise NumericalError(message) from cause
        raise NumericalError(message)

    def get_position(self) -> torch.Tensor:
        """Current position estimate (x, y, z) in meters."""
        return self.state[POSITION].flatten().clone()

    def get_velocity(self) -> torch.Tensor:
        """Current velocity estimate (vx, vy, vz) in m/s."""
        return self.state[VELOCITY].flatten().clone()

    def get_orientation(self) -> torch.Tensor:
        """Current orientation estimate (roll, pitch, yaw) in radians."""
        return self.state[ORIENTATION].flatten().clone()

    def get_covariance(self) -> torch.Tensor:
        """Copy of the error covariance matrix."""
        return self.P.clone()

    def euler_to_quaternion(self, euler: Optional[Any] = None) -> torch.Tensor:
        """
        Convert Euler angles to a unit quaternion [w, x, y, z].

        Args:
            euler: (roll, pitch, yaw) in radians. Defaults to the current orientation estimate.
        """
        if euler is None:
            euler = self.get_orientation()
        return euler_to_quaternion(euler)

    def get_full_state(self) -> Dict[str, Any]:
        """
        Get complete state information.

        Returns:
            Dictionary containing all state variables
        """
        x, y, z = self.get_position().tolist()
        vx, vy, vz = self.get_velocity().tolist()
        roll, pitch, yaw = self.get_orientation().tolist()

        return {
            'position': {'x': x, 'y': y, 'z': z},
            'velocity': {'vx': vx, 'vy': vy, 'vz': vz},
            'orientation': {'roll': roll, 'pitch': pitch, 'yaw': yaw},
            'quaternion': self.euler_to_quaternion().tolist(),
            'uncertainty': torch.diag(self.P).cpu().numpy().tolist(),
            'sample_count': self.sample_count,
        }

    def to(self, device: Union[str, torch.device]):
        """Move filter to specified device."""
        super().to(device)
        self.device = torch.device(device)
        self.state = self.state.to(self.device)
        self.P = self.P.to(self.device)
        self.Q = self.Q.to(self.device)
        self.F = self.F.to(self.device)
        self.imu_sensor.to(self.device)
        return self
