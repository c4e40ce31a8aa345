"""Exception taxonomy for dagnet."""

from __future__ import annotations


class DagNetError(Exception):
    """Base class for all errors raised by dagnet."""


class InvalidInputError(DagNetError, ValueError):
    """Raised when the values supplied to an evaluation do not fit the graph.

    The check happens before any node output is written, so a failed call
    leaves the outputs of the previous pass untouched.
    """


class TopologyError(DagNetError, ValueError):
    """Raised when a graph is wired inconsistently at construction time."""


__all__ = ["DagNetError", "InvalidInputError", "TopologyError"]
