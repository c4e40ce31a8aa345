"""Cosine similarity and nearest-neighbour ranking for word vectors."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from ..core.types import Array

LabelledVector = Tuple[str, Sequence[float]]


class ZeroVectorError(ValueError):
    """Raised when cosine similarity is requested for an all-zero vector."""


def cosine_similarity(a: Sequence[float] | Array, b: Sequence[float] | Array) -> float:
    """Return ``a . b / (|a| |b|)`` clipped to ``[-1, 1]``."""

    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"Vectors must have the same shape, got {a.shape} and {b.shape}")
    norm = np.linalg.norm(a) * np.linalg.norm(b)
    if norm == 0.0:
        raise ZeroVectorError("Cosine similarity is undefined for an all-zero vector")
    return float(np.clip(np.dot(a, b) / norm, -1.0, 1.0))


def most_similar(
    target: Sequence[float] | Array,
    candidates: Iterable[LabelledVector],
    k: int,
) -> List[Tuple[str, float]]:
    """Return the ``k`` most similar ``(label, similarity)`` pairs.

    Results are ordered by descending similarity; ties keep the order in
    which the candidates were given.
    """

    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    scored = [(label, cosine_similarity(target, vector)) for label, vector in candidates]
    scored.sort(key=lambda item: item[1], reverse=True)
    return scored[:k]


def most_similar_words(
    word: str, word_vectors: Sequence[LabelledVector], k: int
) -> List[Tuple[str, float]]:
    """Rank every other word in ``word_vectors`` against ``word``."""

    for label, vector in word_vectors:
        if label == word:
            target = vector
            break
    else:
        raise KeyError(f"Word {word!r} has no vector")
    others = [(label, vector) for label, vector in word_vectors if label != word]
    return most_similar(target, others, k)


def load_word_vectors(path: str | Path) -> List[Tuple[str, Array]]:
    """Read vectors stored in the word2vec text format.

    Each line is a word followed by its components.  A leading
    ``<count> <dim>`` header line is skipped when present.
    """

    vectors: List[Tuple[str, Array]] = []
    lines = Path(path).read_text(encoding="utf-8").splitlines()
    for lineno, line in enumerate(lines):
        parts = line.split()
        if not parts:
            continue
        if lineno == 0 and len(parts) == 2 and all(p.isdigit() for p in parts):
            continue
        try:
            values = np.array([float(p) for p in parts[1:]], dtype=np.float64)
        except ValueError as exc:
            raise ValueError(f"{path}:{lineno + 1}: malformed vector line") from exc
        vectors.append((parts[0], values))
    return vectors
