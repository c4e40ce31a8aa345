"""A single computational unit inside a :class:`~dagnet.core.layer.Layer`."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence, Tuple, Union

import numpy as np

from .activations import sigmoid
from .errors import TopologyError
from .types import Array, Weight

WeightLike = Union[Weight, float]


def _as_weight(value: WeightLike) -> Weight:
    return value if isinstance(value, Weight) else Weight(float(value))


@dataclass(eq=False)
class Node:
    """One weighted-sum-plus-bias unit.

    ``weights`` holds one group per predecessor layer of the owning layer,
    positionally aligned with that predecessor's nodes.  ``bias_weights``
    holds one bias per predecessor layer.  Input-layer nodes carry no
    weights at all.
    """

    name: str = ""
    weights: Tuple[Tuple[Weight, ...], ...] = ()
    bias_weights: Tuple[Weight, ...] = ()
    output: float = 0.0
    _rows: Tuple[Array, ...] = field(init=False, repr=False, default=())
    _bias: float = field(init=False, repr=False, default=0.0)
    _wired: bool = field(init=False, repr=False, default=False)

    def __post_init__(self) -> None:
        self.set_weights(self.weights, self.bias_weights)

    def set_weights(
        self,
        weights: Iterable[Iterable[WeightLike]],
        bias_weights: Iterable[WeightLike],
    ) -> None:
        """Replace the connection and bias weights of this node.

        Once a node is built its group sizes are fixed; new weights must keep
        the same number of groups and the same length per group.
        """

        groups = tuple(tuple(_as_weight(w) for w in group) for group in weights)
        biases = tuple(_as_weight(b) for b in bias_weights)
        if len(groups) != len(biases):
            raise TopologyError(
                f"Node {self.name!r} has {len(groups)} weight groups "
                f"but {len(biases)} bias weights"
            )
        sizes = tuple(len(group) for group in groups)
        if self._wired and sizes != self.group_sizes():
            raise TopologyError(
                f"Node {self.name!r} is wired with weight groups of "
                f"{list(self.group_sizes())}, got {list(sizes)}"
            )
        self.weights = groups
        self.bias_weights = biases
        self._rows = tuple(
            np.fromiter((w.value for w in group), dtype=np.float64, count=len(group))
            for group in groups
        )
        self._bias = float(sum(b.value for b in biases))
        self._wired = True

    @property
    def connection_count(self) -> int:
        """Number of source nodes wired into this node."""

        return sum(len(group) for group in self.weights)

    def group_sizes(self) -> Tuple[int, ...]:
        return tuple(len(group) for group in self.weights)

    def compute_output(
        self,
        contributions: Iterable[Tuple[float, Weight]],
        bias_contributions: Iterable[Weight],
    ) -> float:
        """Store and return ``sigmoid(sum(output * weight) + sum(bias))``."""

        z = sum(float(source) * w.value for source, w in contributions)
        z += sum(b.value for b in bias_contributions)
        self.output = float(sigmoid(z))
        return self.output

    def activate(self, sources: Sequence[Array]) -> float:
        """Activate from the outputs of each predecessor layer, in order."""

        z = self._bias
        for row, source in zip(self._rows, sources, strict=True):
            z += float(np.dot(row, source))
        self.output = float(sigmoid(z))
        return self.output
