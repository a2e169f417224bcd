from __future__ import annotations
from dataclasses import dataclass, field
from typing import Collection, Dict, List, Tuple

from .aggregation import AlternativeAggregator
from .builder import HierarchyBuilder
from .config import configure_parameters
from .elicitation import JudgmentSource, LabelKind
from .exceptions import SessionAborted
from .model import Hierarchy, Node
from .validation import Rejection, Validation


@dataclass
class DecisionResult:
    """The outcome of one session: the weighted tree and the alternatives' scores."""
    hierarchy: Hierarchy
    leaves: List[Node]
    alternatives: List[str]
    scores: Dict[str, float] = field(default_factory=dict)

    def rankings(self) -> List[Tuple[str, float]]:
        """(alternative, score) pairs, best first."""
        return sorted(self.scores.items(), key=lambda x: x[1], reverse=True)

    def to_dict(self) -> dict:
        return self.hierarchy.to_dict()

    def to_dataframe(self):
        """One row per node of the weighted tree; requires pandas."""
        return self.hierarchy.to_dataframe()


class Workflow:
    """
    Runs a complete AHP session against a judgment source.

    Steps:
    1. Ask for the alternatives and the top-level criteria. A count outside
       the configured bounds, or a criterion named like the root, aborts the
       session.
    2. Collect the judgments over the top-level criteria.
    3. Grow the tree with the HierarchyBuilder, weighing each new group.
    4. Score the alternatives under every leaf with the AlternativeAggregator.

    Args:
        source: The JudgmentSource answering every request.
        max_depth: Levels including the root. Defaults to `MAX_DEPTH`.
        threshold: Consistency ratio threshold. Defaults to `CR_THRESHOLD`.
        verbose: Print progress messages.
    """
    def __init__(self, source: JudgmentSource, max_depth: int | None = None, threshold: float | None = None,
                 verbose: bool = True):
        self.source = source
        self.max_depth = max_depth
        self.threshold = threshold
        self.verbose = verbose

    def _log(self, message: str):
        if self.verbose:
            print(message)

    def _request_session_labels(self, kind: LabelKind, min_size: int, max_size: int,
                                taken: Collection[str] = ()) -> List[str]:
        outcome = Validation.check_labels(self.source.request_labels(kind, None), min_size=min_size,
                                          max_size=max_size, taken=taken)
        if outcome.accepted:
            return outcome.value
        if outcome.reason == Rejection.INVALID_COUNT:
            raise SessionAborted(f"You have to enter at least {min_size} {kind.value} and up to {max_size}. "
                                 f"{outcome.message}")
        raise SessionAborted(outcome.message)

    def run(self) -> DecisionResult:
        alternatives = self._request_session_labels(
            LabelKind.ALTERNATIVES, configure_parameters.MIN_ALTERNATIVES, configure_parameters.MAX_ALTERNATIVES)
        criteria = self._request_session_labels(
            LabelKind.CRITERIA, configure_parameters.MIN_TOP_CRITERIA, configure_parameters.MAX_TOP_CRITERIA,
            taken={configure_parameters.ROOT_NAME})

        hierarchy = Hierarchy()
        for name in alternatives:
            hierarchy.add_alternative(name)
        hierarchy.add_criteria(hierarchy.root.name, criteria)

        self._log("\n--- Building Hierarchy ---")
        builder = HierarchyBuilder(self.source, max_depth=self.max_depth, threshold=self.threshold)
        builder.weigh_group(hierarchy.root)
        leaves = builder.build(hierarchy.root)
        self._log(f"Hierarchy complete: {len(leaves)} leaf criteria.")

        self._log("\n--- Ranking Alternatives via Pairwise Comparison ---")
        aggregator = AlternativeAggregator(self.source, threshold=self.threshold)
        hierarchy.scores = aggregator.aggregate(leaves, hierarchy.alternatives)
        self._log("Alternative ranking calculation complete.")

        return DecisionResult(hierarchy=hierarchy, leaves=leaves,
                              alternatives=list(hierarchy.alternatives), scores=dict(hierarchy.scores))
