"""
Accuracy metrics for navigator output.

Compares estimated trajectories against a reference (simulated ground truth
or an external measurement system). Accuracy problems are reported here and
never raised as runtime errors by the filter.
"""

import math
from typing import Dict, Optional, Union

import numpy as np
import torch

from ..exceptions import ConfigurationError

ArrayLike = Union[np.ndarray, torch.Tensor]


def _to_numpy(values: ArrayLike) -> np.ndarray:
    if isinstance(values, torch.Tensor):
        return values.detach().cpu().numpy()
    return np.asarray(values, dtype=np.float64)


def compute_rmse(errors: ArrayLike, axis: Optional[int] = None) -> Union[float, np.ndarray]:
    """
    Compute Root Mean Square Error (RMSE).

    Args:
        errors: Error vectors, shape (N, d) or (N,)
        axis: Axis along which to compute RMSE
              None: scalar RMSE across all dimensions
              0: per-dimension RMSE
              1: per-sample RMSE

    Returns:
        rmse: RMSE value(s)
    """
    errors = _to_numpy(errors)

    if axis is None:
        return float(np.sqrt(np.mean(errors ** 2)))
    return np.sqrt(np.mean(errors ** 2, axis=axis))


def compute_error_stats(errors: ArrayLike) -> Dict[str, float]:
    """
    Summary statistics of error magnitudes.

    Args:
        errors: Error vectors, shape (N, d) or (N,)

    Returns:
        Dictionary with mean, rmse, max, p95 and count

    Raises:
        ConfigurationError: If there are no error samples
    """
    errors = _to_numpy(errors)
    norms = np.linalg.norm(errors, axis=1) if errors.ndim == 2 else np.abs(errors)
    if norms.size == 0:
        raise ConfigurationError("compute_error_stats needs at least one error sample")

    return {
        'mean': float(np.mean(norms)),
        'rmse': float(np.sqrt(np.mean(norms ** 2))),
        'max': float(np.max(norms)),
        'p95': float(np.percentile(norms, 95)),
        'count': int(norms.shape[0]),
    }


def check_accuracy(estimate: Dict[str, ArrayLike],
                   reference: Dict[str, ArrayLike],
                   position_tolerance: float = 0.1,
                   orientation_tolerance: float = math.radians(5.0)) -> Dict[str, object]:
    """
    Check per-axis RMS position and orientation errors against thresholds.

    Defaults are 10 cm for position and 5 degrees for orientation.

    Args:
        estimate: Dictionary with 'position' and 'orientation' arrays (N, 3)
        reference: Dictionary with the same keys and shapes

    Returns:
        Dictionary with per-axis RMS errors and pass flags
    """
    position_rmse = compute_rmse(_to_numpy(estimate['position']) - _to_numpy(reference['position']), axis=0)
    orientation_rmse = compute_rmse(_to_numpy(estimate['orientation']) - _to_numpy(reference['orientation']),
                                    axis=0)

    position_ok = bool(np.max(position_rmse) < position_tolerance)
    orientation_ok = bool(np.max(orientation_rmse) < orientation_tolerance)

    return {
        'position_rmse': position_rmse,
        'orientation_rmse': orientation_rmse,
        'position_ok': position_ok,
        'orientation_ok': orientation_ok,
        'passed': position_ok and orientation_ok,
    }
