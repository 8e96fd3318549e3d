"""Exceptions raised by sacseg."""


class SacsegError(Exception):
    """Base class for sacseg errors."""


class ConfigurationError(SacsegError):
    """Estimator or segmentation is missing a required setting."""


class SamplingExhaustion(SacsegError):
    """No valid sample subset could be drawn from the current pool."""
