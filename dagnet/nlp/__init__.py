"""Word-vector analysis helpers."""

from .similarity import (
    ZeroVectorError,
    cosine_similarity,
    load_word_vectors,
    most_similar,
    most_similar_words,
)

__all__ = [
    "ZeroVectorError",
    "cosine_similarity",
    "load_word_vectors",
    "most_similar",
    "most_similar_words",
]
