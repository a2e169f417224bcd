from __future__ import annotations
from typing import List

from .config import configure_parameters
from .elicitation import JudgmentSource, LabelKind, collect_judgments, collect_labels
from .model import Node
from .propagation import WeightPropagator


class HierarchyBuilder:
    """
    Grows the criteria tree one sibling group at a time, depth-first, asking
    the judgment source for sub-criteria and for one judgment matrix per new
    group.

    Args:
        source: The JudgmentSource answering label and judgment requests.
        max_depth: Levels including the root. Defaults to `MAX_DEPTH`.
        threshold: Consistency ratio threshold. Defaults to `CR_THRESHOLD`.
    """
    def __init__(self, source: JudgmentSource, max_depth: int | None = None, threshold: float | None = None):
        self.source = source
        self.max_depth = configure_parameters.MAX_DEPTH if max_depth is None else max_depth
        self.threshold = threshold
        if self.max_depth < 2:
            raise ValueError("max_depth must leave room for at least one level of criteria below the root.")

    def weigh_group(self, parent: Node):
        """
        Collects the judgments over `parent`'s children, sets their local
        weights and propagates their global weights.

        A single child has nothing to be compared with and gets local weight 1.
        """
        children = parent.children
        if not children:
            return
        if len(children) == 1:
            children[0].set_local_weight(1.0)
        else:
            matrix = collect_judgments(
                self.source,
                f"Fill in the judgments of the {parent.name} level:",
                [child.name for child in children],
                threshold=self.threshold,
            )
            parent.comparison_matrix = matrix
            for child, weight in zip(children, matrix.priority_vector()):
                child.set_local_weight(weight)
        WeightPropagator.propagate_group(parent)

    def build(self, parent: Node, level: int = 1) -> List[Node]:
        """
        Asks for the sub-criteria of every child of `parent`, recursively.

        Node names are unique across the whole tree; a sub-criterion reusing
        any existing name, the root's included, is asked again.

        Args:
            parent: A node whose children already exist and are weighted.
            level: Depth of `parent`'s children (the root's children are level 1).

        Returns:
            The leaf criteria under `parent`, in discovery order.
        """
        leaves: List[Node] = []
        for node in parent.children:
            # The last allowed level cannot hold sub-criteria.
            if level + 1 >= self.max_depth:
                leaves.append(node)
                continue

            taken = {other.name for other in node.root.get_all_nodes()}
            labels = collect_labels(self.source, LabelKind.SUB_CRITERIA, node.name, allow_empty=True, taken=taken)
            if not labels:
                leaves.append(node)
                continue

            for label in labels:
                node.add_child(Node(label))
            self.weigh_group(node)
            leaves.extend(self.build(node, level + 1))
        return leaves
