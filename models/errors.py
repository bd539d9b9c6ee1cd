"""
Error type shared by every calculator.

All invalid, missing or out-of-range inputs and every failed computation
surface as a CalculationError carrying a message fit to show the user.
"""


class CalculationError(ValueError):
    """Raised when a calculator cannot produce a result for its inputs."""
