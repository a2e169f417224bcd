from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Collection, List, Sequence, Union
import math
import numpy as np

from .config import configure_parameters
from .exceptions import (
    AHPError, InvalidGroupSize, MalformedJudgmentRow, InconsistentJudgments, InvalidJudgments
)


class Rejection(str, Enum):
    """Reasons a unit of input is sent back to the judgment source."""
    INVALID_COUNT = "invalid count"
    INVALID_VALUE = "invalid value"
    DUPLICATE_LABELS = "duplicate labels"
    INCONSISTENT_JUDGMENTS = "inconsistent judgments"


_REJECTION_ERRORS = {
    Rejection.INVALID_COUNT: InvalidGroupSize,
    Rejection.INVALID_VALUE: MalformedJudgmentRow,
    Rejection.DUPLICATE_LABELS: InvalidGroupSize,
    Rejection.INCONSISTENT_JUDGMENTS: InconsistentJudgments,
}


@dataclass(frozen=True)
class Accepted:
    value: Any = None

    @property
    def accepted(self) -> bool:
        return True


@dataclass(frozen=True)
class Rejected:
    reason: Rejection
    message: str

    @property
    def accepted(self) -> bool:
        return False

    def to_error(self) -> AHPError:
        """Returns the exception matching this rejection, for callers that prefer raising."""
        return _REJECTION_ERRORS[self.reason](self.message)


Outcome = Union[Accepted, Rejected]


class Validation:
    """
    A class containing static methods to validate the raw input collected for
    a hierarchy: label lists, judgment rows and judgment matrices.

    The `check_*` methods return a tagged `Accepted | Rejected` outcome and are
    meant for retry loops; the `validate_*` methods return a list of error
    strings, an empty list meaning the input is valid.
    """

    @staticmethod
    def check_labels(labels: Sequence[str], min_size: int | None = None, max_size: int | None = None,
                     allow_empty: bool = False, taken: Collection[str] = ()) -> Outcome:
        """
        Checks a list of labels for a sibling group.

        Args:
            labels: The labels entered for the group.
            min_size: Smallest accepted group. Defaults to `MIN_GROUP_SIZE`.
            max_size: Largest accepted group. Defaults to `MAX_GROUP_SIZE`.
            allow_empty: If True, an empty list is accepted (the node becomes a leaf).
            taken: Names already used elsewhere in the hierarchy; reusing one is
                   rejected as a duplicate.

        Returns:
            `Accepted` with the cleaned label list, or `Rejected`.
        """
        min_size = configure_parameters.MIN_GROUP_SIZE if min_size is None else min_size
        max_size = configure_parameters.MAX_GROUP_SIZE if max_size is None else max_size

        cleaned = [label.strip() for label in labels if label and label.strip()]
        if not cleaned and allow_empty:
            return Accepted([])
        if not (min_size <= len(cleaned) <= max_size):
            return Rejected(Rejection.INVALID_COUNT,
                            f"A group ought to have at least {min_size} and no more than {max_size} items. "
                            f"Got {len(cleaned)}.")
        if len(set(cleaned)) != len(cleaned):
            return Rejected(Rejection.DUPLICATE_LABELS, f"Labels must be unique within a group: {cleaned}")
        clashes = [label for label in cleaned if label in taken]
        if clashes:
            return Rejected(Rejection.DUPLICATE_LABELS,
                            f"Names must be unique across the hierarchy, already in use: {clashes}")
        return Accepted(cleaned)

    @staticmethod
    def check_judgment_row(row: Sequence[float], expected_count: int) -> Outcome:
        """
        Checks one row of a judgment matrix.

        Returns:
            `Accepted` with the row as a list of floats, or `Rejected`.
        """
        if row is None or len(row) != expected_count:
            got = 0 if row is None else len(row)
            return Rejected(Rejection.INVALID_COUNT,
                            f"The number of entries ought to match that of the items ({expected_count}). Got {got}.")
        try:
            values = [float(v) for v in row]
        except (TypeError, ValueError) as e:
            return Rejected(Rejection.INVALID_VALUE, f"Judgments must be numbers: {e}")
        for v in values:
            if not math.isfinite(v) or v <= 0:
                return Rejected(Rejection.INVALID_VALUE, f"Judgments must be strictly positive numbers. Found: {v}")
        return Accepted(values)

    @staticmethod
    def validate_matrix_dimensions(matrix: np.ndarray, expected_size: int | None = None) -> List[str]:
        """Validates that a matrix is a 2D square NumPy array of the expected size."""
        errors = []
        if not isinstance(matrix, np.ndarray) or matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
            errors.append("Input must be a 2D square NumPy array.")
            return errors # Stop further checks
        if matrix.shape[0] == 0:
            errors.append("Matrix must hold at least one item.")
        if expected_size is not None and matrix.shape[0] != expected_size:
            errors.append(f"Matrix has size {matrix.shape[0]}, but expected size {expected_size}.")
        return errors

    @staticmethod
    def validate_matrix_values(matrix: np.ndarray) -> List[str]:
        """Validates that every judgment is a finite, strictly positive number."""
        errors = []
        n = matrix.shape[0]
        for i in range(n):
            for j in range(n):
                v = matrix[i, j]
                if not np.isfinite(v) or v <= 0:
                    errors.append(f"Judgment at ({i},{j}) must be strictly positive. Found: {v}")
        return errors

    @staticmethod
    def run_all_matrix_validations(matrix: np.ndarray, expected_size: int | None = None) -> dict:
        """Runs the structural validations on a single judgment matrix."""
        all_errors = {"dimensions": [], "values": []}
        all_errors["dimensions"] = Validation.validate_matrix_dimensions(matrix, expected_size)

        # Only run further checks if dimensions are valid
        if not all_errors["dimensions"]:
            all_errors["values"] = Validation.validate_matrix_values(matrix)
        return all_errors

    @staticmethod
    def ensure_valid_matrix(matrix: np.ndarray, expected_size: int | None = None):
        """Raises `InvalidJudgments` listing every structural problem of the matrix."""
        all_errors = Validation.run_all_matrix_validations(matrix, expected_size)
        errors = all_errors["dimensions"] + all_errors["values"]
        if errors:
            raise InvalidJudgments("; ".join(errors))
