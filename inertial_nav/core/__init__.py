"""Inertial navigation filter."""

from .navigator import InertialNavigator

__all__ = ['InertialNavigator']
