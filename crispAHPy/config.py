from typing import Dict, Callable
import math


RI_Approximation_Func = Callable[[int], float]


def default_ri_approximation(n: int) -> float:
    """
    Closed-form random index used by the approximate consistency ratio.

        RI = (slope * (n - 2) + epsilon) / n

    The epsilon term keeps RI strictly positive for n = 2, where any set of
    reciprocal judgments is consistent and CI collapses to zero.

    Args:
        n: Matrix size.
    """
    if n < 1:
        raise ValueError("Matrix size must be positive.")
    return (configure_parameters.RI_SLOPE * (n - 2) + configure_parameters.RI_EPSILON) / n


class Configuration:
    """
    A singleton-like class to hold all configurable parameters for the crispAHPy library.

    Users can modify these attributes directly to customize the behavior of
    consistency checks, the tree shape policy and the session checks.

    Example:
    >>> from crispAHPy.config import configure_parameters
    >>> # Accept slightly less consistent judgments
    >>> configure_parameters.CR_THRESHOLD = 0.15
    >>> # Allow one more level of sub-criteria
    >>> configure_parameters.MAX_DEPTH = 5
    """

    def __init__(self):
        self.reset_to_defaults()

    def reset_to_defaults(self):
        """Resets all configuration parameters to their original default values."""

        # --- Consistency Parameters (from consistency.py) ---

        # Judgments with a consistency ratio above this value are rejected.
        self.CR_THRESHOLD: float = 0.1

        # Coefficients of the closed-form random index approximation
        self.RI_SLOPE: float = 1.98
        self.RI_EPSILON: float = math.exp(-8)

        self.RI_APPROXIMATION_FUNC: RI_Approximation_Func = default_ri_approximation

        # Saaty's Random Consistency Index (RI) values, only used by the
        # opt-in 'saaty_cr' method.
        # Source: Saaty, T. L. (2008)
        self.SAATY_RI_VALUES: Dict[int | str, float] = {
            1: 0.00, 2: 0.00, 3: 0.52, 4: 0.89, 5: 1.11, 6: 1.25, 7: 1.35,
            8: 1.40, 9: 1.45, 10: 1.49, 11: 1.52, 12: 1.54, 13: 1.56, 14: 1.58, 15: 1.59,
            'default': 1.60 # Default for n > 15
        }

        self.DEFAULT_WEIGHT_METHOD: str = "column_average"
        self.DEFAULT_CONSISTENCY_METHOD: str = "approximate_cr"

        # --- Hierarchy Shape Parameters (from builder.py) ---

        # Levels including the synthetic root: 4 leaves room for 3 levels of criteria.
        self.MAX_DEPTH: int = 4

        # Size of a sub-criteria sibling group
        self.MIN_GROUP_SIZE: int = 2
        self.MAX_GROUP_SIZE: int = 3

        self.ROOT_NAME: str = "Root"

        # --- Session Parameters (from pipeline.py) ---

        self.MIN_ALTERNATIVES: int = 2
        self.MAX_ALTERNATIVES: int = 3
        self.MIN_TOP_CRITERIA: int = 1
        self.MAX_TOP_CRITERIA: int = 3

        # --- General Numerical Parameters ---

        # Small tolerance value for float comparisons
        self.FLOAT_TOLERANCE: float = 1e-9

configure_parameters = Configuration()



class ConfigurationContextManager:
    """
    A context manager to temporarily change configuration parameters.

    Usage:
    >>> with ConfigurationContextManager(CR_THRESHOLD=0.05):
    >>>     # Code block runs with CR threshold set to 0.05
    >>>     ...
    >>> # CR threshold reverts to its original value outside the block
    """
    def __init__(self, **kwargs):
        self.changes = kwargs
        self.original_values = {}

    def __enter__(self):
        for key, value in self.changes.items():
            if not hasattr(configure_parameters, key):
                raise AttributeError(f"Configuration object has no attribute '{key}'")
            self.original_values[key] = getattr(configure_parameters, key)
            setattr(configure_parameters, key, value)
        return configure_parameters

    def __exit__(self, exc_type, exc_val, exc_tb):
        for key, value in self.original_values.items():
            setattr(configure_parameters, key, value)
