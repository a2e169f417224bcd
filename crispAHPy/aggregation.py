from __future__ import annotations
from typing import Dict, List, Sequence, TYPE_CHECKING
import numpy as np

from .elicitation import JudgmentSource, collect_judgments

if TYPE_CHECKING:
    from .model import Node


class AlternativeAggregator:
    """
    Scores each alternative against the full set of leaf criteria:

        score[a] = sum over leaves of priority_leaf[a] * leaf.global_weight

    Totals are not normalized; they sum to 1 because the leaves' global
    weights do.
    """
    def __init__(self, source: JudgmentSource | None = None, threshold: float | None = None):
        self.source = source
        self.threshold = threshold

    @staticmethod
    def accumulate(scores: Dict[str, float], alternatives: Sequence[str], priorities: Sequence[float], weight: float):
        """Adds one leaf's weighted priorities to the running scores."""
        if len(priorities) != len(alternatives):
            raise ValueError(f"Got {len(priorities)} priorities for {len(alternatives)} alternatives.")
        for alternative, priority in zip(alternatives, priorities):
            scores[alternative] += float(priority) * weight

    @staticmethod
    def aggregate_priorities(
        weights: Sequence[float],
        priority_vectors: Sequence[Sequence[float]],
        alternatives: Sequence[str]
    ) -> Dict[str, float]:
        """
        Pure aggregation: one global weight and one priority vector per leaf.

        Example: leaves weighted 0.7 and 0.3 with priorities [0.8, 0.2] and
        [0.4, 0.6] give A = 0.7*0.8 + 0.3*0.4 = 0.68 and B = 0.32.
        """
        if len(weights) != len(priority_vectors):
            raise ValueError("Need exactly one priority vector per leaf weight.")
        scores = {alternative: 0.0 for alternative in alternatives}
        for weight, priorities in zip(weights, priority_vectors):
            AlternativeAggregator.accumulate(scores, alternatives, priorities, weight)
        return scores

    @staticmethod
    def _leaf_weight(leaf: Node) -> float:
        if leaf.global_weight is None:
            raise RuntimeError(f"Leaf '{leaf.name}' has no global weight; propagate weights before scoring.")
        return leaf.global_weight

    def aggregate(self, leaves: Sequence[Node], alternatives: Sequence[str]) -> Dict[str, float]:
        """
        Collects one alternatives matrix per leaf from the judgment source and
        accumulates the weighted priorities.

        Each accepted matrix is stored on its leaf as `alternative_matrix`.
        """
        if self.source is None:
            raise RuntimeError("AlternativeAggregator needs a judgment source to collect matrices.")

        scores = {alternative: 0.0 for alternative in alternatives}
        for leaf in leaves:
            weight = self._leaf_weight(leaf)
            matrix = collect_judgments(
                self.source,
                f"Fill in the judgments of the alternatives regarding the {leaf.name} criterion:",
                list(alternatives),
                threshold=self.threshold,
            )
            leaf.alternative_matrix = matrix
            self.accumulate(scores, alternatives, matrix.priority_vector(), weight)
        return scores

    @staticmethod
    def aggregate_matrices(leaves: Sequence[Node], alternatives: Sequence[str]) -> Dict[str, float]:
        """
        Scores leaves that already carry an `alternative_matrix`.
        """
        weights: List[float] = []
        priority_vectors: List[np.ndarray] = []
        for leaf in leaves:
            if leaf.alternative_matrix is None:
                raise ValueError(f"Leaf node '{leaf.name}' is missing its alternative comparison matrix.")
            weights.append(AlternativeAggregator._leaf_weight(leaf))
            priority_vectors.append(leaf.alternative_matrix.priority_vector())
        return AlternativeAggregator.aggregate_priorities(weights, priority_vectors, alternatives)
