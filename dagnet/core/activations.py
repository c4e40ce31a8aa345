"""Activation utilities for dagnet."""

from __future__ import annotations

import numpy as np

from .types import Array


def sigmoid(x: Array | float) -> Array | float:
    """Return the logistic sigmoid ``1 / (1 + e^-x)``."""

    # exp(-x) overflows to inf for very negative x, which still yields 0.0
    with np.errstate(over="ignore"):
        return 1.0 / (1.0 + np.exp(-x))
