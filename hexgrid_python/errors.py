"""
Exception and warning types raised by the hexgrid layout builder.

- ConfigurationError: invalid extent, radius or option (fatal)
- InvalidPointError: a single data point that cannot be binned (recoverable)
- MissingCollaboratorError: a projection or boundary hook is needed but absent (fatal)
"""


class ConfigurationError(ValueError):
    """Raised before any computation when the grid is misconfigured."""


class MissingCollaboratorError(RuntimeError):
    """Raised when a call path needs a projection or boundary hook that was not supplied."""


class InvalidPointError(ValueError):
    """Diagnostic for a data point excluded from binning.

    Instances are collected on the layout rather than raised.
    """

    def __init__(self, index, reason, point=None):
        self.index = index
        self.reason = reason
        self.point = point
        super().__init__(f"point {index}: {reason}")


class InvalidPointWarning(UserWarning):
    """Emitted once per call when one or more points were skipped."""
