"""Similarity scoring between embedding vectors."""
from typing import Sequence

import numpy as np


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Compute the cosine similarity of two vectors.

    The raw formula is returned without clamping. Vectors of different
    length, and vectors with zero magnitude, score 0.

    Args:
        a: First vector
        b: Second vector

    Returns:
        float: Cosine similarity
    """
    if len(a) != len(b):
        return 0.0

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    denominator = np.linalg.norm(va) * np.linalg.norm(vb)
    if denominator == 0:
        return 0.0
    return float(np.dot(va, vb) / denominator)
