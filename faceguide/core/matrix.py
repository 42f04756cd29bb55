"""Small dense linear algebra helpers used by the similarity solver.

Matrices are accepted as anything numpy can turn into a 2D float array
(lists of rows included). Shapes are not validated: callers are the fixed
shape least-squares code in this package.
"""

import logging
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)

# Pivots smaller than this mark the system as singular
PIVOT_EPSILON = 1e-8


def transpose(matrix) -> np.ndarray:
    return np.array(matrix, dtype=float).T


def multiply_matrices(a, b) -> np.ndarray:
    return np.dot(np.asarray(a, dtype=float), np.asarray(b, dtype=float))


def multiply_matrix_vector(a, v) -> np.ndarray:
    return np.dot(np.asarray(a, dtype=float), np.asarray(v, dtype=float))


def invert_4x4(matrix) -> Optional[np.ndarray]:
    """Invert a 4x4 matrix with Gauss-Jordan elimination and partial pivoting.

    Args:
        matrix: 4x4 matrix. It is copied into a private augmented array and
            never modified.

    Returns:
        The inverse, or None when a pivot falls below PIVOT_EPSILON.
    """
    n = 4
    augmented = np.hstack([np.array(matrix, dtype=float), np.eye(n)])

    for col in range(n):
        # Row with the largest magnitude in this column (first one on ties)
        pivot = col + int(np.argmax(np.abs(augmented[col:, col])))
        pivot_value = augmented[pivot, col]
        if abs(pivot_value) < PIVOT_EPSILON:
            logger.debug(f"Singular matrix: pivot {pivot_value!r} in column {col}")
            return None

        if pivot != col:
            augmented[[col, pivot]] = augmented[[pivot, col]]

        augmented[col] /= augmented[col, col]
        for row in range(n):
            if row == col:
                continue
            augmented[row] -= augmented[row, col] * augmented[col]

    return augmented[:, n:].copy()
