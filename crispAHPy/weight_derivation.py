from __future__ import annotations
from typing import Callable, Dict
import numpy as np
import warnings

from .exceptions import InvalidJudgments


# ==============================================================================
# 1. REGISTRY FOR CUSTOMIZATION
# ==============================================================================

WEIGHT_DERIVATION_REGISTRY: Dict[str, Callable[[np.ndarray], np.ndarray]] = {}

def register_weight_method(method_name: str):
    """A decorator to register a new weight derivation method."""
    def decorator(func):
        if method_name in WEIGHT_DERIVATION_REGISTRY:
            warnings.warn(f"Overwriting existing weight method '{method_name}'", UserWarning)
        WEIGHT_DERIVATION_REGISTRY[method_name] = func
        return func
    return decorator


# ==============================================================================
# 2. NORMALIZATION
# ==============================================================================

def normalize_columns(matrix: np.ndarray) -> np.ndarray:
    """
    Divides every entry by the sum of its column, so that each column of the
    result sums to 1.

    Raises:
        InvalidJudgments: If any column sums to zero.
    """
    column_sums = matrix.sum(axis=0)
    zero_columns = np.flatnonzero(column_sums == 0)
    if zero_columns.size:
        raise InvalidJudgments(f"Cannot normalize: column(s) {zero_columns.tolist()} sum to zero.")
    return matrix / column_sums


# ==============================================================================
# 3. CLASSIC AHP ALGORITHMS
# ==============================================================================

@register_weight_method('column_average')
def column_average_method(matrix: np.ndarray) -> np.ndarray:
    """
    Derives weights as the row averages of the column-normalized matrix.

    .. note::
        This is the approximation taught alongside Saaty's method: it needs no
        eigenvalue computation and matches the principal eigenvector exactly
        when the judgments are consistent.
    """
    normalized = normalize_columns(matrix)
    return normalized.sum(axis=1) / matrix.shape[0]

@register_weight_method('geometric_mean')
def geometric_mean_method(matrix: np.ndarray) -> np.ndarray:
    """
    Derives weights from the normalized geometric means of the rows.
    """
    n = matrix.shape[0]
    row_geo_means = np.prod(matrix, axis=1) ** (1.0 / n)
    total = row_geo_means.sum()
    if total == 0:
        raise InvalidJudgments("Cannot derive weights: all row geometric means are zero.")
    return row_geo_means / total


# ==============================================================================
# 4. DISPATCHER
# ==============================================================================

def derive_weights(matrix: np.ndarray, method: str = "column_average") -> np.ndarray:
    """
    Derives a priority vector from a judgment matrix using the specified method.

    Args:
        matrix: The crisp judgment matrix of shape (n, n).
        method: The name of a registered weight derivation method.

    Returns:
        A 1D array of n weights summing to 1.
    """
    derivation_func = WEIGHT_DERIVATION_REGISTRY.get(method)

    if derivation_func is None:
        raise ValueError(
            f"Method '{method}' is not registered. Available methods: {list(WEIGHT_DERIVATION_REGISTRY.keys())}"
        )

    weights = np.asarray(derivation_func(matrix), dtype=float)
    if weights.shape != (matrix.shape[0],):
        raise TypeError(f"Registered method {derivation_func.__name__} returned {weights.shape} weights "
                        f"for a {matrix.shape[0]}x{matrix.shape[0]} matrix.")
    return weights
