from __future__ import annotations
from typing import Dict, List, Sequence
import numpy as np
import math

from .config import configure_parameters
from .consistency import Consistency
from .exceptions import InconsistentJudgments
from .validation import Validation, Accepted, Rejected, Rejection, Outcome
from .weight_derivation import derive_weights, normalize_columns


# ==============================================================================
# 1. THE JUDGMENT MATRIX
# ==============================================================================

class JudgmentMatrix:
    """
    A square matrix of pairwise judgments over one sibling group.

    Entry (i, j) states how much item i is preferred over item j. All n*n
    entries, diagonal included, are supplied by the caller; the matrix is not
    required to be reciprocal. Row and column i correspond to `labels[i]`.

    The normalized matrix, the priority vector and the consistency ratio are
    derived on demand from the raw judgments.
    """
    def __init__(
        self,
        raw: Sequence[Sequence[float]] | np.ndarray,
        labels: Sequence[str] | None = None,
        weight_method: str | None = None,
        consistency_method: str | None = None
    ):
        matrix = np.array(raw, dtype=float)
        Validation.ensure_valid_matrix(matrix, expected_size=len(labels) if labels is not None else None)
        matrix.setflags(write=False)

        self._raw = matrix
        self.labels: List[str] = list(labels) if labels is not None else [f"item_{i + 1}" for i in range(matrix.shape[0])]
        self.weight_method = weight_method or configure_parameters.DEFAULT_WEIGHT_METHOD
        self.consistency_method = consistency_method or configure_parameters.DEFAULT_CONSISTENCY_METHOD
        self._priorities: np.ndarray | None = None

    def __repr__(self) -> str:
        return f"JudgmentMatrix(size={self.size}, labels={self.labels})"

    @property
    def raw(self) -> np.ndarray:
        """The judgments as entered (read-only)."""
        return self._raw

    @property
    def size(self) -> int:
        return self._raw.shape[0]

    def normalize(self) -> np.ndarray:
        """
        Returns the column-normalized matrix: each entry divided by its column sum.

        Raises:
            InvalidJudgments: If a column sums to zero.
        """
        return normalize_columns(self._raw)

    def priority_vector(self) -> np.ndarray:
        """
        Returns the priority (weight) vector of the group, summing to 1.

        With the default 'column_average' method this is the row average of
        the normalized matrix.
        """
        if self._priorities is None:
            priorities = derive_weights(self._raw, method=self.weight_method)
            priorities.setflags(write=False)
            self._priorities = priorities
        return self._priorities

    def consistency_ratio(self) -> float:
        """
        Returns CR = CI / RI for the judgments.

        Raises:
            InvalidJudgments: For a 1x1 matrix, where CI is undefined.
        """
        return Consistency.calculate(self._raw, self.priority_vector(), method=self.consistency_method)

    def is_consistent(self, threshold: float | None = None) -> bool:
        """True if the consistency ratio does not exceed the threshold (default 0.1)."""
        return self.evaluate(threshold).accepted

    def evaluate(self, threshold: float | None = None) -> Outcome:
        """
        Accepts or rejects the judgments as a whole.

        A single-item matrix is trivially accepted. Rejection is all-or-nothing:
        the caller must collect the complete matrix again.

        Returns:
            `Accepted(self)` or `Rejected(INCONSISTENT_JUDGMENTS, ...)`.
        """
        if self.size == 1:
            return Accepted(self)

        threshold = configure_parameters.CR_THRESHOLD if threshold is None else threshold
        cr = self.consistency_ratio()
        if math.isnan(cr) or cr > threshold:
            return Rejected(Rejection.INCONSISTENT_JUDGMENTS,
                            f"The coherence of the judgments is flawed (CR = {cr:.4f} > {threshold}). "
                            f"Try reconsidering the judgments.")
        return Accepted(self)

    def require_consistent(self, threshold: float | None = None) -> JudgmentMatrix:
        """Same as `evaluate` but raises `InconsistentJudgments` on rejection."""
        outcome = self.evaluate(threshold)
        if not outcome.accepted:
            raise InconsistentJudgments(outcome.message, consistency_ratio=self.consistency_ratio())
        return self

    def with_labels(self, labels: Sequence[str]) -> JudgmentMatrix:
        """Returns a copy of the judgments under new labels; `self` is unchanged."""
        return JudgmentMatrix(self._raw, labels=labels, weight_method=self.weight_method,
                              consistency_method=self.consistency_method)

    def weights_by_label(self) -> Dict[str, float]:
        """Returns the priority vector keyed by label."""
        return {label: float(w) for label, w in zip(self.labels, self.priority_vector())}


# ==============================================================================
# 2. MATRIX CREATION
# ==============================================================================

def create_matrix_from_rows(rows: Sequence[Sequence[float]], labels: Sequence[str] | None = None) -> JudgmentMatrix:
    """
    Creates a judgment matrix from its full rows, exactly as entered.
    """
    return JudgmentMatrix(rows, labels=labels)

def _get_matrix_size_from_list_len(num_judgments: int) -> int:
    """
    Calculates the size 'n' of a square matrix given 'k' pairwise judgments
    from its upper triangle. Solves the equation n*(n-1)/2 = k.

    Raises:
        ValueError: If the number of judgments does not correspond to a valid matrix.
    """
    # n^2 - n - 2k = 0, positive root only
    discriminant = 1 + 8 * num_judgments
    n = (1 + math.sqrt(discriminant)) / 2

    if num_judgments < 1 or n != int(n):
        raise ValueError(f"Invalid number of judgments ({num_judgments}). Does not correspond to a full upper-triangle matrix.")

    return int(n)

def create_matrix_from_list(judgments: Sequence[float], labels: Sequence[str] | None = None) -> JudgmentMatrix:
    """
    Creates a complete, reciprocal judgment matrix from a flattened list of
    upper-triangle judgments (read row by row).

    Example: For a 3x3 matrix, the list should contain 3 judgments for the
    pairs (1,2), (1,3), (2,3) in that order.

    Args:
        judgments: A flat list of judgment values.
        labels: Optional item labels.

    Returns:
        A JudgmentMatrix with ones on the diagonal and a_ji = 1 / a_ij.
    """
    size = _get_matrix_size_from_list_len(len(judgments))
    matrix = np.ones((size, size))
    judgment_iterator = iter(judgments)

    for i in range(size):
        for j in range(i + 1, size):
            value = float(next(judgment_iterator))
            if value <= 0:
                raise ValueError(f"Judgment for pair ({i},{j}) must be strictly positive. Found: {value}")
            matrix[i, j] = value
            matrix[j, i] = 1.0 / value

    return JudgmentMatrix(matrix, labels=labels)

def create_matrix_from_judgments(judgments: Dict[tuple, float], items: List[str]) -> JudgmentMatrix:
    """
    Creates a complete, reciprocal judgment matrix from a dictionary of
    judgments keyed by (item, other_item). Missing pairs default to 1.
    """
    n = len(items)
    item_map = {name: i for i, name in enumerate(items)}
    matrix = np.ones((n, n))

    for (item1, item2), value in judgments.items():
        try:
            i, j = item_map[item1], item_map[item2]
        except KeyError as e:
            raise ValueError(f"Item '{e.args[0]}' in judgments not found in the list of items.") from e

        if i == j:
            raise ValueError(f"Judgment '{item1}' vs '{item2}' compares an item with itself.")
        if value <= 0:
            raise ValueError(f"Judgment '{item1}' vs '{item2}' must be strictly positive. Found: {value}")

        matrix[i, j] = float(value)
        matrix[j, i] = 1.0 / float(value)

    return JudgmentMatrix(matrix, labels=items)
