"""Core numerical primitives for dagnet."""

from . import activations, errors, types
from .errors import DagNetError, InvalidInputError, TopologyError
from .initialise import initialise, initialise_layer
from .layer import Layer
from .node import Node
from .plan import EvaluationPlan
from .types import Weight

__all__ = [
    "activations",
    "errors",
    "types",
    "DagNetError",
    "EvaluationPlan",
    "InvalidInputError",
    "Layer",
    "Node",
    "TopologyError",
    "Weight",
    "initialise",
    "initialise_layer",
]
