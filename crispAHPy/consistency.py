from __future__ import annotations
from typing import Dict, Any, TYPE_CHECKING, Callable
import numpy as np
import warnings

from .config import configure_parameters
from .exceptions import InvalidJudgments

if TYPE_CHECKING:
    from .model import Hierarchy, Node


class Registry(dict):
    """
    A custom dictionary that validates insertions to ensure only
    callable objects (functions, methods) are registered.
    """
    def __setitem__(self, key: str, value: Callable):
        if not callable(value):
            raise TypeError(
                f"Attempted to register a non-callable object of type '{type(value).__name__}' "
                f"for the key '{key}'. Only functions or methods can be registered."
            )
        if key in self:
            warnings.warn(f"Overwriting consistency method '{key}'", UserWarning)
        super().__setitem__(key, value)

    def register(self, name: str) -> Callable:
        """Decorator factory for registering a function."""
        def decorator(func: Callable) -> Callable:
            self[name] = func
            return func
        return decorator

CONSISTENCY_METHODS = Registry()

def register_consistency_method(name: str) -> Callable:
    """
    A decorator to register a new consistency ratio method.

    The decorated function receives the raw matrix and its priority vector and
    must return the ratio as a float; judgments are rejected when the ratio
    exceeds `configure_parameters.CR_THRESHOLD`.
    """
    return CONSISTENCY_METHODS.register(name)


class Consistency:
    """
    A class with static methods to calculate and check the consistency of
    judgment matrices within a Hierarchy.
    """

    @staticmethod
    def lambda_max(matrix: np.ndarray, weights: np.ndarray) -> float:
        """
        Row-sum estimate of the principal eigenvalue: the sum of the entries of
        `matrix @ weights`.
        """
        return float(np.sum(matrix @ weights))

    @staticmethod
    def consistency_index(matrix: np.ndarray, weights: np.ndarray) -> float:
        """CI = (lambda_max - n) / (n - 1)."""
        n = matrix.shape[0]
        if n < 2:
            raise InvalidJudgments("Consistency is undefined for a single item: there is nothing to compare.")
        return (Consistency.lambda_max(matrix, weights) - n) / (n - 1)

    @staticmethod
    def _get_random_index(n: int) -> float:
        """Random index from the configured closed-form approximation."""
        return configure_parameters.RI_APPROXIMATION_FUNC(n)

    @CONSISTENCY_METHODS.register("approximate_cr")
    def calculate_approximate_cr(matrix: np.ndarray, weights: np.ndarray, **kwargs) -> float:
        """
        Consistency ratio using the row-sum lambda_max and the closed-form
        random index `(1.98 * (n - 2) + e^-8) / n`.

        .. warning::
            Both terms are approximations. The textbook method uses the
            principal eigenvalue and Saaty's tabulated random indices; results
            of this method are not interchangeable with 'saaty_cr'.

        Args:
            matrix: The raw judgment matrix.
            weights: Its priority vector.

        Returns:
            CR = CI / RI.
        """
        n = matrix.shape[0]
        ci = Consistency.consistency_index(matrix, weights)
        return ci / Consistency._get_random_index(n)

    @CONSISTENCY_METHODS.register("saaty_cr")
    def calculate_saaty_cr(matrix: np.ndarray, weights: np.ndarray, **kwargs) -> float:
        """
        Consistency ratio using the row-sum lambda_max and Saaty's random
        index table from the configuration.

        .. note::
            For n <= 2 the tabulated RI is zero; the ratio is reported as 0
            when CI is zero and as infinity otherwise.
        """
        n = matrix.shape[0]
        ci = Consistency.consistency_index(matrix, weights)
        table = configure_parameters.SAATY_RI_VALUES
        ri = table.get(n, table['default'])
        if ri <= 0:
            return 0.0 if abs(ci) <= configure_parameters.FLOAT_TOLERANCE else float('inf')
        return ci / ri

    @staticmethod
    def calculate(matrix: np.ndarray, weights: np.ndarray, method: str | None = None) -> float:
        """Dispatches to a registered consistency method."""
        method = method or configure_parameters.DEFAULT_CONSISTENCY_METHOD
        func = CONSISTENCY_METHODS.get(method)
        if func is None:
            raise ValueError(f"Unknown consistency method '{method}'. Available: {list(CONSISTENCY_METHODS.keys())}")
        return float(func(matrix, weights))

    @staticmethod
    def check_model_consistency(model: Hierarchy, threshold: float | None = None) -> Dict[str, Dict[str, Any]]:
        """
        Reports the consistency of every matrix stored in the hierarchy.

        Criteria groups are keyed by their parent's name; alternative matrices
        are keyed as "<leaf name> (alternatives)".

        Returns:
            A dictionary of {key: {'size', 'consistency_ratio', 'is_consistent'}}.
        """
        threshold = configure_parameters.CR_THRESHOLD if threshold is None else threshold
        results: Dict[str, Dict[str, Any]] = {}

        def _report(key: str, matrix):
            cr = matrix.consistency_ratio() if matrix.size > 1 else 0.0
            results[key] = {
                "size": matrix.size,
                "consistency_ratio": cr,
                "is_consistent": cr <= threshold,
            }

        for node in model.get_all_nodes():
            if node.comparison_matrix is not None:
                _report(node.name, node.comparison_matrix)
            if node.alternative_matrix is not None:
                _report(f"{node.name} (alternatives)", node.alternative_matrix)
        return results
