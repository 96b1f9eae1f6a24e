"""Sensor integration modules."""

from .imu import IMUSample, IMUSensor, Measurement

__all__ = ['IMUSample', 'IMUSensor', 'Measurement']
