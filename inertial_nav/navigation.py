"""
IMU stream processing.

Runs a recorded or simulated IMU stream through an InertialNavigator,
collects the estimated trajectory and checks every sample against the
real-time budget (processing time must stay below the sampling interval).
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import torch

from .core.navigator import InertialNavigator
from .utils.preprocessing import preprocess_imu_stream

logger = logging.getLogger(__name__)


@dataclass
class NavigationResult:
    """Trajectory estimated from an IMU stream."""

    orientation: torch.Tensor  # (N, 3)
    velocity: torch.Tensor  # (N, 3)
    position: torch.Tensor  # (N, 3)
    sample_times: torch.Tensor  # (N,)
    latencies: torch.Tensor  # (N,) seconds spent in process_sample
    budget: float  # seconds available per sample
    overruns: int = 0

    def __len__(self) -> int:
        return self.position.shape[0]

    @property
    def max_latency(self) -> float:
        return float(self.latencies.max()) if len(self) else 0.0

    @property
    def mean_latency(self) -> float:
        return float(self.latencies.mean()) if len(self) else 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Plain numpy arrays for logging or plotting consumers."""
        return {
            'time': self.sample_times.cpu().numpy(),
            'orientation': self.orientation.cpu().numpy(),
            'velocity': self.velocity.cpu().numpy(),
            'position': self.position.cpu().numpy(),
            'latency': self.latencies.cpu().numpy(),
            'overruns': self.overruns,
        }


def process_imu_stream(navigator: InertialNavigator,
                       accel: Any,
                       gyro: Any,
                       budget: Optional[float] = None) -> NavigationResult:
    """
    Process a whole IMU stream sample by sample.

    Args:
        navigator: Navigator to feed; its state carries over between calls
        accel: Accelerometer samples, shape (N, 3)
        gyro: Gyroscope samples, shape (N, 3)
        budget: Per-sample time budget in seconds, defaults to the navigator's dt

    Returns:
        NavigationResult with one row per sample

    Raises:
        NumericalError: Propagated from the navigator; the stream is aborted
    """
    accel, gyro = preprocess_imu_stream(accel, gyro, navigator.device, navigator.dtype,
                                        sampling_rate=navigator.sampling_rate)
    budget = navigator.dt if budget is None else budget
    n = accel.shape[0]

    orientations = torch.zeros(n, 3, dtype=navigator.dtype)
    velocities = torch.zeros(n, 3, dtype=navigator.dtype)
    positions = torch.zeros(n, 3, dtype=navigator.dtype)
    latencies = torch.zeros(n, dtype=torch.float64)
    overruns = 0
    start_index = navigator.sample_count

    for i in range(n):
        start = time.perf_counter()
        orientation, velocity, position = navigator.process_sample(accel[i], gyro[i])
        elapsed = time.perf_counter() - start

        orientations[i] = orientation.cpu()
        velocities[i] = velocity.cpu()
        positions[i] = position.cpu()
        latencies[i] = elapsed

        if elapsed > budget:
            overruns += 1
            logger.warning("Sample %d took %.2f ms, over the %.2f ms budget",
                           start_index + i, elapsed * 1e3, budget * 1e3)

    sample_times = (torch.arange(n, dtype=torch.float64) + start_index) * navigator.dt

    if overruns:
        logger.warning("%d of %d samples exceeded the real-time budget", overruns, n)

    return NavigationResult(orientation=orientations,
                            velocity=velocities,
                            position=positions,
                            sample_times=sample_times,
                            latencies=latencies,
                            budget=budget,
                            overruns=overruns)
