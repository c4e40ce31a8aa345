"""Layers: ordered groups of nodes wired into a directed acyclic graph."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence, Tuple, Union

import numpy as np

from .errors import TopologyError
from .node import Node
from .plan import EvaluationPlan
from .types import Array, Weight

Inputs = Union[Sequence[float], Mapping["Layer", Sequence[float]]]


class Layer:
    """An ordered group of nodes sharing the same predecessor layers.

    ``nodes`` is either a node count, which creates zero-weighted nodes
    shaped to ``previous_layers``, or an iterable of pre-wired
    :class:`Node` objects.  A layer without predecessors is an input layer.
    Layers compare and hash by identity, so one layer may feed several
    downstream layers and is still evaluated once per pass.
    """

    def __init__(
        self,
        name: str,
        nodes: int | Iterable[Node] = 0,
        previous_layers: Iterable["Layer"] = (),
    ) -> None:
        self.name = name
        self._previous_layers: Tuple["Layer", ...] = tuple(previous_layers)
        if isinstance(nodes, int):
            nodes = [self._blank_node(f"{name}[{i}]") for i in range(nodes)]
        self.nodes: Tuple[Node, ...] = tuple(nodes)
        self._validate()
        self._plan: EvaluationPlan | None = None

    def _blank_node(self, name: str) -> Node:
        return Node(
            name=name,
            weights=tuple(
                tuple(Weight(0.0) for _ in prev.nodes) for prev in self.previous_layers
            ),
            bias_weights=tuple(Weight(0.0) for _ in self.previous_layers),
        )

    def _validate(self) -> None:
        expected = tuple(len(prev) for prev in self.previous_layers)
        for node in self.nodes:
            if node.group_sizes() != expected:
                raise TopologyError(
                    f"Incorrect amount of weights supplied to node {node.name!r} "
                    f"in layer {self.name!r}: expected groups of {list(expected)}, "
                    f"got {list(node.group_sizes())}"
                )

    @property
    def previous_layers(self) -> Tuple["Layer", ...]:
        """Predecessor layers, fixed at construction so cached plans stay valid."""

        return self._previous_layers

    def __len__(self) -> int:
        return len(self.nodes)

    def __repr__(self) -> str:
        prev = [layer.name for layer in self.previous_layers]
        return f"Layer(name={self.name!r}, nodes={len(self.nodes)}, previous_layers={prev})"

    @property
    def is_input(self) -> bool:
        return not self.previous_layers

    @property
    def outputs(self) -> Array:
        return np.array([node.output for node in self.nodes], dtype=np.float64)

    def plan(self) -> EvaluationPlan:
        """Return the cached evaluation plan rooted at this layer."""

        if self._plan is None:
            self._plan = EvaluationPlan(self)
        return self._plan

    @property
    def input_layers(self) -> Tuple["Layer", ...]:
        return self.plan().input_layers

    def populate_results(self, inputs: Inputs) -> Array:
        """Evaluate the whole graph feeding this layer and return its outputs.

        ``inputs`` is a vector for the single input layer of the graph, or a
        mapping from each input layer to its vector when there are several.
        Every length is checked before any output is overwritten; a
        mismatch raises :class:`~dagnet.core.errors.InvalidInputError`.
        """

        plan = self.plan()
        resolved = plan.resolve_inputs(inputs)
        plan.run(resolved)
        return plan.outputs_of(self)

    def populate_result(self, layer_index: int, node_index: int, value: float) -> float:
        """Set one input node and recompute everything downstream of it.

        ``layer_index`` indexes :attr:`input_layers`.  Nodes of input layers
        that have not been set keep their previous outputs.
        """

        plan = self.plan()
        plan.set_input(layer_index, node_index, value)
        plan.run({})
        return float(value)


__all__ = ["Layer"]
