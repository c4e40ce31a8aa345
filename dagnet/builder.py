"""Declarative network construction from presets and config files."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

import numpy as np

from .core.errors import TopologyError
from .core.initialise import initialise_layer
from .core.layer import Layer
from .core.node import Node

logger = logging.getLogger(__name__)

_PRESETS: Dict[str, Mapping[str, object]] = {
    "basic": {
        "layers": [
            {"name": "input", "size": 1},
            {
                "name": "inner",
                "inputs": ["input"],
                "nodes": [{"weights": {"input": [0.2]}, "bias": {"input": 0.7}}],
            },
            {
                "name": "output",
                "inputs": ["inner"],
                "nodes": [{"weights": {"inner": [0.9]}, "bias": {"inner": 0.4}}],
            },
        ],
        "output": "output",
    },
    "diamond": {
        "layers": [
            {"name": "input", "size": 1},
            {
                "name": "inner1",
                "inputs": ["input"],
                "nodes": [{"weights": {"input": [0.2]}, "bias": {"input": 0.7}}],
            },
            {
                "name": "inner2",
                "inputs": ["input"],
                "nodes": [{"weights": {"input": [0.2]}, "bias": {"input": 0.7}}],
            },
            {
                "name": "output",
                "inputs": ["inner1", "inner2"],
                "nodes": [
                    {
                        "weights": {"inner1": [0.9], "inner2": [0.9]},
                        "bias": {"inner1": 0.4, "inner2": 0.4},
                    }
                ],
            },
        ],
        "output": "output",
    },
    "multi_node": {
        "layers": [
            {"name": "input", "size": 2},
            {
                "name": "inner",
                "inputs": ["input"],
                "nodes": [
                    {"weights": {"input": [0.02, 0.07]}},
                    {"weights": {"input": [0.03, 0.11]}},
                    {"weights": {"input": [0.05, 0.13]}},
                ],
            },
            {
                "name": "output",
                "inputs": ["inner"],
                "nodes": [
                    {"weights": {"inner": [0.17, 0.23, 0.31]}},
                    {"weights": {"inner": [0.19, 0.29, 0.37]}},
                ],
            },
        ],
        "output": "output",
    },
}


@dataclass(frozen=True)
class Network:
    """A built graph: every layer by name plus the layer to evaluate."""

    layers: Mapping[str, Layer]
    output: Layer

    def evaluate(self, inputs) -> Dict[str, List[float]]:
        """Populate the graph and return every reachable layer's outputs."""

        self.output.populate_results(inputs)
        return {layer.name: layer.outputs.tolist() for layer in self.output.plan().layers}


def presets() -> Mapping[str, Mapping[str, object]]:
    return dict(_PRESETS)


def load_preset(name: str) -> Mapping[str, object]:
    try:
        return json.loads(json.dumps(_PRESETS[name]))
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def load_network_file(path: str | Path) -> Mapping[str, object]:
    """Read a network config from a JSON or YAML file."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in {".yaml", ".yml", ".json"}:
        raise ValueError(f"Unsupported network file type: {path.suffix}")
    text = path.read_text()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load network files in YAML format") from exc
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text or "{}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Network file {path.name} must decode to a mapping")
    return data


def _build_node(
    layer_name: str,
    position: int,
    entry: Mapping[str, object],
    previous: Sequence[Layer],
) -> Node:
    weights_cfg = entry.get("weights", {})
    bias_cfg = entry.get("bias", {})
    if not isinstance(weights_cfg, Mapping) or not isinstance(bias_cfg, Mapping):
        raise TopologyError(
            f"Node {position} of {layer_name!r}: 'weights' and 'bias' must be mappings"
        )
    known = {prev.name for prev in previous}
    for key in list(weights_cfg) + list(bias_cfg):
        if key not in known:
            raise TopologyError(
                f"Node {position} of {layer_name!r} references {key!r}, "
                f"which is not one of its inputs {sorted(known)}"
            )

    groups = []
    for prev in previous:
        row = weights_cfg.get(prev.name)
        if row is None:
            raise TopologyError(
                f"Node {position} of {layer_name!r} has no weights for input {prev.name!r}"
            )
        row = [float(w) for w in row]  # type: ignore[union-attr]
        if len(row) != len(prev):
            raise TopologyError(
                f"Incorrect amount of weights supplied to node {position} of "
                f"{layer_name!r} from {prev.name!r}: expected {len(prev)}, got {len(row)}"
            )
        groups.append(row)
    biases = [float(bias_cfg.get(prev.name, 0.0)) for prev in previous]  # type: ignore[arg-type]
    name = str(entry.get("name", f"{layer_name}[{position}]"))
    return Node(name=name, weights=groups, bias_weights=biases)


def build_network(config: Mapping[str, object]) -> Network:
    """Wire the layers described by ``config`` into a :class:`Network`."""

    entries = config.get("layers")
    if not isinstance(entries, Sequence) or not entries:
        raise TopologyError("Network config needs a non-empty 'layers' list")

    layers: Dict[str, Layer] = {}
    blank: List[Layer] = []
    for entry in entries:
        if not isinstance(entry, Mapping) or "name" not in entry:
            raise TopologyError("Every layer entry must be a mapping with a 'name'")
        name = str(entry["name"])
        if name in layers:
            raise TopologyError(f"Duplicate layer name: {name!r}")

        refs = entry.get("inputs", [])
        if isinstance(refs, str) or not isinstance(refs, Sequence):
            raise TopologyError(
                f"Layer {name!r}: 'inputs' must be a list of layer names, got {refs!r}"
            )
        previous = []
        for ref in refs:
            if ref not in layers:
                raise TopologyError(
                    f"Layer {name!r} references {ref!r} before it is declared"
                )
            previous.append(layers[ref])

        size = entry.get("size")
        node_cfg = entry.get("nodes")
        if node_cfg is None:
            if size is None:
                raise TopologyError(f"Layer {name!r} needs either 'size' or 'nodes'")
            layer = Layer(name, int(size), previous)  # type: ignore[arg-type]
            if previous:
                blank.append(layer)
        else:
            if not previous:
                raise TopologyError(f"Input layer {name!r} cannot declare weighted nodes")
            if size is not None and int(size) != len(node_cfg):  # type: ignore[arg-type]
                raise TopologyError(
                    f"Layer {name!r} declares size {size} but lists {len(node_cfg)} nodes"  # type: ignore[arg-type]
                )
            nodes = [
                _build_node(name, pos, node, previous)
                for pos, node in enumerate(node_cfg)  # type: ignore[arg-type]
            ]
            layer = Layer(name, nodes, previous)
        layers[name] = layer

    output_name = str(config.get("output", list(layers)[-1]))
    if output_name not in layers:
        raise TopologyError(f"Output layer {output_name!r} is not declared")
    output = layers[output_name]

    init_cfg = config.get("initialise")
    if isinstance(init_cfg, Mapping) and blank:
        rng = np.random.default_rng(int(init_cfg.get("seed", 0)))  # type: ignore[arg-type]
        scale = init_cfg.get("scale")
        for layer in blank:
            initialise_layer(rng, layer, None if scale is None else float(scale))  # type: ignore[arg-type]

    logger.info(
        "Built network with %d layers, output %r (%d nodes)",
        len(layers),
        output.name,
        len(output),
    )
    return Network(layers=layers, output=output)


__all__ = [
    "Network",
    "build_network",
    "load_network_file",
    "load_preset",
    "presets",
]
