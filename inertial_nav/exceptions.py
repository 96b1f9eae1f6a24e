"""Exceptions raised by the inertial navigation package."""


class NavigationError(Exception):
    """Base class for all inertial navigation errors."""


class ConfigurationError(NavigationError, ValueError):
    """Invalid navigator configuration or malformed input shape."""


class NumericalError(NavigationError, ArithmeticError):
    """
    The filter hit a numerically unusable situation.

    Raised for a singular innovation covariance, non-finite sensor readings,
    or a non-finite gain/state after the update. The navigator that raised it
    must be re-constructed before further use.
    """
