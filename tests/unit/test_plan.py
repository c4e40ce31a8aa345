import math
from collections import Counter

import numpy as np
import pytest

from dagnet.core.errors import TopologyError
from dagnet.core.layer import Layer
from dagnet.core.node import Node
from dagnet.core.plan import EvaluationPlan


def _count_evaluations(monkeypatch):
    counts = Counter()
    original = EvaluationPlan._evaluate_layer

    def counting(self, idx):
        counts[self.layers[idx].name] += 1
        return original(self, idx)

    monkeypatch.setattr(EvaluationPlan, "_evaluate_layer", counting)
    return counts


def test_shared_ancestors_registered_once():
    root = Layer("Input", 2)
    a = Layer("A", 3, [root])
    b = Layer("B", 3, [root])
    c = Layer("C", 2, [a, b])
    d = Layer("D", 1, [c, a])
    plan = d.plan()
    assert [layer.name for layer in plan.layers] == ["Input", "A", "B", "C", "D"]
    assert plan.predecessors[plan.index_of(d)] == (plan.index_of(c), plan.index_of(a))
    assert plan.input_layers == (root,)
    assert d.plan() is plan


def test_each_layer_evaluated_once_per_pass(monkeypatch):
    counts = _count_evaluations(monkeypatch)
    root = Layer("Input", 1)
    a = Layer("A", 1, [root])
    b = Layer("B", 1, [root])
    c = Layer("C", 1, [a, b])
    out = Layer("Out", 1, [c, a, root])

    out.populate_results([0.5])
    assert counts == {"Input": 1, "A": 1, "B": 1, "C": 1, "Out": 1}

    out.populate_results([0.25])
    assert set(counts.values()) == {2}


def test_populate_result_recomputes_downstream(monkeypatch):
    counts = _count_evaluations(monkeypatch)
    root = Layer("Input", 2)
    hidden = Layer("Hidden", [Node(weights=[[1.0, 1.0]], bias_weights=[0.0])], [root])
    hidden.populate_result(0, 1, 3.0)
    assert counts == {"Input": 1, "Hidden": 1}
    assert root.outputs.tolist() == [0.0, 3.0]
    partial = hidden.outputs[0]
    hidden.populate_result(0, 0, -3.0)
    assert hidden.outputs[0] != partial
    assert hidden.outputs[0] == pytest.approx(0.5)


def test_deep_chain_evaluates_without_recursion_limit(monkeypatch):
    counts = _count_evaluations(monkeypatch)
    layer = Layer("Input", 1)
    for depth in range(2500):
        layer = Layer(f"h{depth}", [Node(weights=[[1.0]], bias_weights=[0.0])], [layer])

    result = layer.populate_results([0.5])

    expected = 0.5
    for _ in range(2500):
        expected = 1.0 / (1.0 + math.exp(-expected))
    assert result[0] == pytest.approx(expected, abs=1e-12)
    assert len(layer.plan().layers) == 2501
    assert set(counts.values()) == {1}


def test_cycles_are_rejected():
    a = Layer("A", 1)
    b = Layer("B", 1, [a])
    a._previous_layers = (b,)
    with pytest.raises(TopologyError):
        EvaluationPlan(b)


def test_output_buffers_reused_between_passes():
    root = Layer("Input", 2)
    out = Layer("Out", 2, [root])
    plan = out.plan()
    buffers = [id(buf) for buf in plan.outputs]
    out.populate_results([1.0, 2.0])
    out.populate_results([3.0, 4.0])
    assert [id(buf) for buf in plan.outputs] == buffers
    assert np.array_equal(plan.outputs[plan.index_of(root)], [3.0, 4.0])
    returned = out.populate_results([5.0, 6.0])
    returned[:] = -1.0
    assert np.allclose(out.outputs, 0.5)


def test_index_of_unknown_layer():
    plan = Layer("Input", 1).plan()
    with pytest.raises(KeyError):
        plan.index_of(Layer("Other", 1))
