"""dagnet public API."""

from . import nlp  # noqa: F401
from .builder import Network, build_network, load_network_file, load_preset, presets
from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.errors import DagNetError, InvalidInputError, TopologyError
from .core.initialise import initialise
from .core.layer import Layer
from .core.node import Node
from .core.plan import EvaluationPlan
from .core.types import Weight

__all__ = [
    "DagNetError",
    "EvaluationPlan",
    "InvalidInputError",
    "Layer",
    "Network",
    "Node",
    "TopologyError",
    "Weight",
    "activations",
    "build_network",
    "initialise",
    "load_network_file",
    "load_preset",
    "nlp",
    "presets",
    "types",
]
