"""Evaluation plans: the layer arena behind :meth:`Layer.populate_results`."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Mapping, Sequence, Tuple

import numpy as np

from .errors import InvalidInputError, TopologyError
from .types import Array

if TYPE_CHECKING:  # pragma: no cover
    from .layer import Layer

logger = logging.getLogger(__name__)


class EvaluationPlan:
    """Arena of every layer reachable from ``root``.

    Layers are registered once, predecessors first, and referred to by their
    arena index everywhere else.  The arena order is a topological order,
    so one pass over it evaluates every layer exactly once.  The per-layer output
    buffers are owned by the plan and reused across passes, so a plan must
    not be evaluated from several threads at once.
    """

    def __init__(self, root: "Layer") -> None:
        self.root = root
        self.layers: List["Layer"] = []
        self._index: Dict[int, int] = {}
        self._register(root)
        self.predecessors: List[Tuple[int, ...]] = [
            tuple(self._index[id(prev)] for prev in layer.previous_layers)
            for layer in self.layers
        ]
        self.input_indices: Tuple[int, ...] = tuple(
            idx for idx, layer in enumerate(self.layers) if layer.is_input
        )
        self.outputs: List[Array] = [
            np.fromiter((n.output for n in layer.nodes), dtype=np.float64, count=len(layer))
            for layer in self.layers
        ]
        self._inputs: Mapping[int, Array] = {}
        logger.debug(
            "Built evaluation plan for %r: %d layers, %d input layers",
            root.name,
            len(self.layers),
            len(self.input_indices),
        )

    def _register(self, root: "Layer") -> None:
        # Iterative post-order walk: the arena ends up predecessors-first.
        active = {id(root)}
        stack = [(root, iter(root.previous_layers))]
        while stack:
            layer, pending = stack[-1]
            for prev in pending:
                key = id(prev)
                if key in self._index:
                    continue
                if key in active:
                    raise TopologyError(f"Layer {prev.name!r} is part of a cycle")
                active.add(key)
                stack.append((prev, iter(prev.previous_layers)))
                break
            else:
                stack.pop()
                active.discard(id(layer))
                self._index[id(layer)] = len(self.layers)
                self.layers.append(layer)

    # ------------------------------------------------------------------
    # Lookup

    def index_of(self, layer: "Layer") -> int:
        try:
            return self._index[id(layer)]
        except KeyError:
            raise KeyError(f"Layer {layer.name!r} is not part of this plan") from None

    @property
    def input_layers(self) -> Tuple["Layer", ...]:
        return tuple(self.layers[idx] for idx in self.input_indices)

    def outputs_of(self, layer: "Layer") -> Array:
        return self.outputs[self.index_of(layer)].copy()

    # ------------------------------------------------------------------
    # Input handling

    def resolve_inputs(
        self, inputs: Sequence[float] | Mapping["Layer", Sequence[float]]
    ) -> Dict[int, Array]:
        """Map ``inputs`` onto input-layer indices, validating every length."""

        if isinstance(inputs, Mapping):
            resolved: Dict[int, Array] = {}
            for layer, values in inputs.items():
                idx = self._index.get(id(layer))
                if idx is None or idx not in self.input_indices:
                    name = getattr(layer, "name", layer)
                    raise InvalidInputError(f"{name!r} is not an input layer of this graph")
                resolved[idx] = self._check_length(idx, values)
            missing = [self.layers[idx].name for idx in self.input_indices if idx not in resolved]
            if missing:
                raise InvalidInputError(f"No inputs supplied for input layers {missing}")
            return resolved

        if len(self.input_indices) != 1:
            names = [layer.name for layer in self.input_layers]
            raise InvalidInputError(
                f"Graph has {len(names)} input layers {names}; "
                "supply inputs as a mapping keyed by input layer"
            )
        idx = self.input_indices[0]
        return {idx: self._check_length(idx, inputs)}

    def _check_length(self, idx: int, values: Sequence[float]) -> Array:
        arr = np.asarray(values, dtype=np.float64)
        layer = self.layers[idx]
        if arr.ndim != 1 or arr.shape[0] != len(layer):
            raise InvalidInputError(
                f"Incorrect amount of inputs supplied to {layer.name!r}: "
                f"expected {len(layer)}, got {arr.size}"
            )
        return arr

    def set_input(self, layer_index: int, node_index: int, value: float) -> None:
        """Write ``value`` into one node of the ``layer_index``-th input layer."""

        if not 0 <= layer_index < len(self.input_indices):
            raise InvalidInputError(
                f"Input layer index {layer_index} out of range "
                f"(graph has {len(self.input_indices)} input layers)"
            )
        idx = self.input_indices[layer_index]
        layer = self.layers[idx]
        if not 0 <= node_index < len(layer):
            raise InvalidInputError(
                f"Node index {node_index} out of range for {layer.name!r} "
                f"({len(layer)} nodes)"
            )
        layer.nodes[node_index].output = float(value)
        self.outputs[idx][node_index] = float(value)

    # ------------------------------------------------------------------
    # Evaluation

    def run(self, inputs: Mapping[int, Array]) -> None:
        """Run one evaluation pass.

        ``inputs`` must come from :meth:`resolve_inputs`.  Input layers that
        receive no values keep their nodes' current outputs.  Layers are
        evaluated once each, in arena order, so every predecessor is
        populated before the layers that read it.
        """

        self._inputs = inputs
        try:
            for idx in range(len(self.layers)):
                self._evaluate_layer(idx)
        finally:
            self._inputs = {}

    def _evaluate_layer(self, idx: int) -> None:
        layer = self.layers[idx]
        buffer = self.outputs[idx]
        if layer.is_input:
            values = self._inputs.get(idx)
            for pos, node in enumerate(layer.nodes):
                if values is not None:
                    node.output = float(values[pos])
                buffer[pos] = node.output
            return
        sources = [self.outputs[prev] for prev in self.predecessors[idx]]
        for pos, node in enumerate(layer.nodes):
            buffer[pos] = node.activate(sources)


__all__ = ["EvaluationPlan"]
