"""Command line entry point for evaluating dagnet networks."""

from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path
from typing import Iterable

from dagnet import builder
from dagnet.core.errors import DagNetError
from dagnet.nlp import load_word_vectors, most_similar_words


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=sorted(builder.presets().keys()),
        default="basic",
        help="Preset network to evaluate",
    )
    parser.add_argument(
        "--config", type=Path, help="JSON/YAML network file (overrides --preset)"
    )
    parser.add_argument(
        "--inputs",
        type=float,
        nargs="*",
        default=None,
        help="Input vector for the network's input layer",
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--vectors", type=Path, help="word2vec text file to rank instead of evaluating"
    )
    parser.add_argument("--word", help="Word to rank the vectors against")
    parser.add_argument("--top", type=int, default=10, help="Number of neighbours")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("DAGNET_LOG_LEVEL", "WARNING"),
        help="Logging level (defaults to $DAGNET_LOG_LEVEL or WARNING)",
    )
    return parser.parse_args(argv)


def _rank(args: argparse.Namespace) -> str:
    if not args.word:
        raise SystemExit("--word is required together with --vectors")
    try:
        vectors = load_word_vectors(args.vectors)
        ranked = most_similar_words(args.word, vectors, args.top)
    except (OSError, KeyError, ValueError) as exc:
        raise SystemExit(f"error: {exc}") from None
    payload = {"word": args.word, "neighbours": [[w, s] for w, s in ranked]}
    return json.dumps(payload, sort_keys=True)


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)
    level = logging.getLevelName(str(args.log_level).upper())
    if not isinstance(level, int):
        raise SystemExit(f"error: unknown log level {args.log_level!r}")
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_presets:
        for name in sorted(builder.presets().keys()):
            print(name)
        raise SystemExit(0)

    if args.vectors:
        print(_rank(args))
        return

    if args.config:
        try:
            config = builder.load_network_file(args.config)
        except (OSError, ValueError, TypeError, RuntimeError) as exc:
            raise SystemExit(f"error: {exc}") from None
        source = str(args.config)
    else:
        config = builder.load_preset(args.preset)
        source = args.preset

    try:
        network = builder.build_network(config)
        inputs = args.inputs if args.inputs is not None else []
        layers = network.evaluate(inputs)
    except DagNetError as exc:
        raise SystemExit(f"error: {exc}") from None

    payload = {
        "network": source,
        "output": layers[network.output.name],
        "layers": layers,
    }
    print(json.dumps(payload, sort_keys=True))


if __name__ == "__main__":
    main()
