"""Seeded random weight initialisation for wired layer graphs."""

from __future__ import annotations

import logging

import numpy as np

from .layer import Layer

logger = logging.getLogger(__name__)


def initialise_layer(
    rng: np.random.Generator, layer: Layer, scale: float | None = None
) -> None:
    """Draw fresh weights and biases for the nodes of ``layer`` only.

    Draws are ``standard_normal`` values multiplied by ``scale``, which
    defaults to ``1 / sqrt(fan_in)``.
    """

    sizes = [len(prev) for prev in layer.previous_layers]
    if not sizes:
        return
    node_scale = scale if scale is not None else 1.0 / np.sqrt(max(1, sum(sizes)))
    for node in layer.nodes:
        node.set_weights(
            [rng.standard_normal(size) * node_scale for size in sizes],
            rng.standard_normal(len(sizes)) * node_scale,
        )


def initialise(rng: np.random.Generator, layer: Layer, scale: float | None = None) -> None:
    """Initialise every non-input layer reachable from ``layer``, predecessors first."""

    layers = [current for current in layer.plan().layers if not current.is_input]
    for current in layers:
        initialise_layer(rng, current, scale)
    logger.debug("Initialised %d layers reachable from %r", len(layers), layer.name)


__all__ = ["initialise", "initialise_layer"]
