"""Core typing contracts for dagnet."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

Array = np.ndarray


@dataclass(frozen=True)
class Weight:
    """A scalar coefficient on a connection or a per-layer bias term."""

    value: float

    def __float__(self) -> float:
        return float(self.value)
