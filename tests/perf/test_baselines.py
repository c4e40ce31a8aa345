import time

import numpy as np
import pytest

from dagnet import Layer, initialise


@pytest.mark.perf
def test_repeated_evaluation_runtime():
    group = Layer("Input", 20)
    inner1 = Layer("Inner1", 100, [group])
    inner2 = Layer("Inner2", 100, [group])
    output = Layer("Output", 20, [inner1, inner2])
    initialise(np.random.default_rng(0), output)
    inputs = np.full(20, 0.5)

    first = output.populate_results(inputs)
    start = time.perf_counter()
    for _ in range(200):
        result = output.populate_results(inputs)
    elapsed = time.perf_counter() - start

    assert np.array_equal(result, first)
    assert elapsed < 20.0
