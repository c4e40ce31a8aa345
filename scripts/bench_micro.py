from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from statistics import mean, pstdev


def _fmt_mu_sigma(vals):
    mu = mean(vals)
    sd = pstdev(vals) if len(vals) > 1 else 0.0
    return f"{mu:.4f} ± {sd:.4f}"


def main():
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))

    import numpy as np

    from dagnet import Layer, initialise

    ap = argparse.ArgumentParser()
    ap.add_argument("--seeds", nargs="+", type=int, default=[123, 124, 125])
    ap.add_argument("--passes", type=int, default=5000)
    ap.add_argument("--input-size", type=int, default=20)
    ap.add_argument("--hidden-size", type=int, default=100)
    ap.add_argument("--out", type=str, default=".artifacts/bench")
    args = ap.parse_args()

    out = Path(args.out)
    out.mkdir(parents=True, exist_ok=True)
    runs = []
    for s in args.seeds:
        inputs_layer = Layer("Input", args.input_size)
        inner1 = Layer("Inner1", args.hidden_size, [inputs_layer])
        inner2 = Layer("Inner2", args.hidden_size, [inputs_layer])
        output = Layer("Output", args.input_size, [inner1, inner2])
        initialise(np.random.default_rng(s), output)
        inputs = np.full(args.input_size, 0.5)

        start = time.perf_counter()
        for _ in range(args.passes):
            output.populate_results(inputs)
        elapsed = time.perf_counter() - start
        runs.append(
            {
                "seed": s,
                "passes": args.passes,
                "seconds": elapsed,
                "ms_per_pass": 1000.0 * elapsed / args.passes,
                "output_mean": float(output.outputs.mean()),
            }
        )
    (out / "results.jsonl").write_text(
        "\n".join(json.dumps(x) for x in runs), encoding="utf-8"
    )

    per_pass = [r["ms_per_pass"] for r in runs]
    print(f"{args.passes} passes per seed, ms/pass: {_fmt_mu_sigma(per_pass)}")


if __name__ == "__main__":
    main()
