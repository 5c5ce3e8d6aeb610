"""Exceptions raised for malformed simulation parameters.

An edge range with no feasible result is not an error: the optimizer
returns ``None`` for it.
"""

from __future__ import annotations


class EquityEdgeError(ValueError):
    """Base class for configuration errors."""


class MissingParameterError(EquityEdgeError):
    """A required parameter (and all of its legacy fallbacks) is absent."""


class InvalidParameterError(EquityEdgeError):
    """A parameter is present but outside its valid domain."""
