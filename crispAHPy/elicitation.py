from __future__ import annotations
from collections import deque
from enum import Enum
from typing import Collection, Iterable, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from .exceptions import SourceExhausted
from .matrix_builder import JudgmentMatrix
from .validation import Rejection, Validation


class LabelKind(str, Enum):
    """What a label request is about."""
    ALTERNATIVES = "alternatives"
    CRITERIA = "criteria"
    SUB_CRITERIA = "sub_criteria"


# ==============================================================================
# 1. THE BOUNDARY CONTRACT
# ==============================================================================

@runtime_checkable
class JudgmentSource(Protocol):
    """
    Whatever supplies labels and judgments to the engine: a console, a
    scripted list, a web form. Every call may block until input arrives.
    """

    def request_labels(self, kind: LabelKind, node_name: Optional[str]) -> List[str]:
        """Returns the labels for a group, possibly empty."""
        ...

    def begin_group(self, title: str, labels: Sequence[str]) -> None:
        """Announces the matrix about to be collected, one row per label."""
        ...

    def request_judgment_row(self, node_label: str, expected_count: int) -> Sequence[float]:
        """Returns one row of judgments for `node_label`."""
        ...

    def report_rejection(self, reason: Rejection, message: str) -> None:
        """Tells the source that the last unit of input must be entered again."""
        ...


# ==============================================================================
# 2. RETRY-UNTIL-VALID LOOPS
# ==============================================================================

def collect_labels(
    source: JudgmentSource,
    kind: LabelKind,
    node_name: Optional[str],
    allow_empty: bool = True,
    min_size: int | None = None,
    max_size: int | None = None,
    taken: Collection[str] = ()
) -> List[str]:
    """
    Requests labels until the source returns an acceptable group.
    Labels found in `taken` are rejected as duplicates.

    Returns:
        The cleaned labels; an empty list only if `allow_empty` is True.
    """
    while True:
        outcome = Validation.check_labels(source.request_labels(kind, node_name),
                                          min_size=min_size, max_size=max_size, allow_empty=allow_empty,
                                          taken=taken)
        if outcome.accepted:
            return outcome.value
        source.report_rejection(outcome.reason, outcome.message)


def collect_judgments(
    source: JudgmentSource,
    title: str,
    labels: Sequence[str],
    threshold: float | None = None
) -> JudgmentMatrix:
    """
    Collects a full judgment matrix over `labels`, one row per label.

    A row of the wrong length is requested again on its own. An inconsistent
    matrix is discarded as a whole and every row is requested again.

    Returns:
        The accepted JudgmentMatrix.
    """
    n = len(labels)
    while True:
        source.begin_group(title, labels)
        rows = []
        for label in labels:
            while True:
                outcome = Validation.check_judgment_row(source.request_judgment_row(label, n), n)
                if outcome.accepted:
                    rows.append(outcome.value)
                    break
                source.report_rejection(outcome.reason, outcome.message)

        matrix = JudgmentMatrix(rows, labels=labels)
        outcome = matrix.evaluate(threshold)
        if outcome.accepted:
            return matrix
        source.report_rejection(outcome.reason, outcome.message)


# ==============================================================================
# 3. SCRIPTED SOURCE
# ==============================================================================

class ScriptedSource:
    """
    A judgment source replaying prepared answers in order.

    Labels and rows are consumed first-in first-out, regardless of which node
    asks for them; rejected answers stay consumed, so a script that expects a
    retry lists the corrected answer right after the rejected one.

    Example:
    >>> source = ScriptedSource(
    ...     labels=[["A", "B"], ["Cost", "Quality"], [], []],
    ...     rows=[[1, 3], [1/3, 1],      # Cost vs Quality
    ...           [1, 4], [1/4, 1],      # alternatives under Cost
    ...           [1, 2/3], [3/2, 1]])   # alternatives under Quality
    """
    def __init__(self, labels: Iterable[Sequence[str]] = (), rows: Iterable[Sequence[float]] = ()):
        self._labels = deque(list(group) for group in labels)
        self._rows = deque(list(row) for row in rows)
        self.groups: List[Tuple[str, List[str]]] = []
        self.rejections: List[Tuple[Rejection, str]] = []

    def request_labels(self, kind: LabelKind, node_name: Optional[str]) -> List[str]:
        if not self._labels:
            raise SourceExhausted(f"No scripted labels left for {kind.value} of '{node_name}'.")
        return self._labels.popleft()

    def begin_group(self, title: str, labels: Sequence[str]) -> None:
        self.groups.append((title, list(labels)))

    def request_judgment_row(self, node_label: str, expected_count: int) -> Sequence[float]:
        if not self._rows:
            raise SourceExhausted(f"No scripted judgment rows left for '{node_label}'.")
        return self._rows.popleft()

    def report_rejection(self, reason: Rejection, message: str) -> None:
        self.rejections.append((reason, message))

    @property
    def exhausted(self) -> bool:
        """True once every scripted answer has been consumed."""
        return not self._labels and not self._rows
