from __future__ import annotations
import weakref
from typing import Dict, List, Optional, Tuple, Any, Sequence

from .config import configure_parameters
from .exceptions import InvalidGroupSize
from .matrix_builder import JudgmentMatrix
from .propagation import WeightPropagator

try:
    import pandas as pd
    _PANDAS_AVAILABLE = True
except ImportError:
    _PANDAS_AVAILABLE = False

def _check_pandas_availability():
    """Helper function to raise an error if pandas is not installed."""
    if not _PANDAS_AVAILABLE:
        raise ImportError("DataFrame export requires the 'pandas' library. "
                          "Please install it using: pip install pandas")


class Node:
    """
    Represents a single node in an AHP hierarchy: the synthetic root, a
    criterion or a sub-criterion.

    The parent is held as a weak reference; a node is owned only by its
    parent's `children` list.
    """
    def __init__(self, name: str, description: Optional[str] = None):
        if not name:
            raise ValueError("Node name cannot be empty.")
        self._name = name
        self.description = description
        self._parent_ref: Optional[weakref.ReferenceType[Node]] = None
        self.children: List[Node] = []
        self.local_weight: float = 1.0
        self.global_weight: Optional[float] = None
        self.comparison_matrix: Optional[JudgmentMatrix] = None
        self.alternative_matrix: Optional[JudgmentMatrix] = None

    def __repr__(self) -> str:
        global_w_str = f"{self.global_weight:.4f}" if self.global_weight is not None else "N/A"
        return (f"Node(name='{self.name}', local_weight={self.local_weight:.3f}, "
                f"global_weight={global_w_str}, children={len(self.children)})")

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self) -> Optional[Node]:
        return self._parent_ref() if self._parent_ref is not None else None

    def add_child(self, child: Node):
        """
        Appends a child node and establishes the parent-child link.
        """
        child._parent_ref = weakref.ref(self)
        self.children.append(child)

    def set_local_weight(self, value: float):
        """
        Records the node's priority within its sibling group.

        The global weight is left untouched; it is set by the WeightPropagator
        once the parent's global weight is known.
        """
        self.local_weight = float(value)

    @property
    def is_leaf(self) -> bool:
        """
        A node is a leaf if it has no children.
        """
        return len(self.children) == 0

    @property
    def root(self) -> Node:
        """The topmost ancestor reachable through the parent links."""
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def depth(self) -> int:
        """Number of edges between this node and the root."""
        depth, node = 0, self.parent
        while node is not None:
            depth, node = depth + 1, node.parent
        return depth

    def get_all_leaf_nodes(self) -> List[Node]:
        """
        Recursively finds all leaf nodes under this node, in pre-order.
        """
        if self.is_leaf: return [self]
        leaves = []
        for c in self.children: leaves.extend(c.get_all_leaf_nodes())
        return leaves

    def get_all_nodes(self) -> List[Node]:
        """Recursively finds all nodes (including self) under this node."""
        nodes = [self]
        for child in self.children:
            nodes.extend(child.get_all_nodes())
        return nodes

    def to_dict(self) -> Dict[str, Any]:
        """Serializes the Node, its weights and its children to a JSON-compatible dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "local_weight": self.local_weight,
            "global_weight": self.global_weight,
            "consistency_ratio": self.consistency_ratio,
            "children": [child.to_dict() for child in self.children]
        }

    @property
    def consistency_ratio(self) -> Optional[float]:
        """CR of the accepted matrix over this node's children, if any."""
        if self.comparison_matrix is None or self.comparison_matrix.size < 2:
            return None
        return self.comparison_matrix.consistency_ratio()


class Hierarchy:
    """
    Holds a weighted criteria tree, its alternatives and the final scores.

    The interactive path fills it through the `Workflow`; the programmatic
    path mirrors the same steps with `set_comparison_matrix`,
    `set_alternative_matrix` and `rank_alternatives`.
    """
    def __init__(self, root_node: Node | None = None):
        self.root = root_node or Node(configure_parameters.ROOT_NAME)
        self.root.global_weight = 1.0
        self.alternatives: List[str] = []
        self.scores: Dict[str, float] = {}

    def __repr__(self) -> str:
        return (f"Hierarchy(root='{self.root.name}', nodes={len(self.get_all_nodes())}, "
                f"alternatives={self.alternatives})")

    # --- Structure ---

    def add_alternative(self, name: str):
        """
        Adds a new alternative to the model.

        Raises:
            ValueError: If an alternative with the same name already exists.
        """
        if not name:
            raise ValueError("Alternative name cannot be empty.")
        if name in self.alternatives:
            raise ValueError(f"Alternative '{name}' already exists in the model.")
        self.alternatives.append(name)

    def add_criteria(self, parent_name: str, names: Sequence[str]) -> List[Node]:
        """
        Creates child nodes under `parent_name`, in the given order.

        Raises:
            ValueError: If a name repeats within the group or is already used
                        anywhere in the hierarchy, the root included. Nothing
                        is added in that case.
        """
        parent = self._require_node(parent_name)
        if len(set(names)) != len(names):
            raise ValueError(f"Criteria names must be unique within a group: {list(names)}")
        for name in names:
            if self._find_node(name) is not None:
                raise ValueError(f"A node named '{name}' already exists in the hierarchy.")
        nodes = []
        for name in names:
            node = Node(name)
            parent.add_child(node)
            nodes.append(node)
        return nodes

    def _find_node(self, name: str, start_node: Optional[Node] = None) -> Optional[Node]:
        """Helper to find a node by its name anywhere in the tree."""
        start = start_node or self.root
        if start.name == name: return start
        for c in start.children:
            found = self._find_node(name, c)
            if found: return found
        return None

    def _require_node(self, name: str) -> Node:
        node = self._find_node(name)
        if node is None:
            raise ValueError(f"Node '{name}' not found.")
        return node

    def get_all_nodes(self) -> List[Node]:
        return self.root.get_all_nodes()

    @property
    def leaves(self) -> List[Node]:
        """Leaf criteria in discovery order."""
        return self.root.get_all_leaf_nodes()

    # --- Weights ---

    def set_comparison_matrix(self, parent_name: str, matrix: JudgmentMatrix | Sequence[Sequence[float]],
                              threshold: float | None = None):
        """
        Sets the judgment matrix for the children of a given parent node,
        assigns the children's local weights and propagates global weights
        through the group.

        Raises:
            InvalidGroupSize: If the matrix size differs from the number of children.
            InconsistentJudgments: If the matrix is rejected; no weight is changed.
        """
        parent_node = self._require_node(parent_name)
        if parent_node.is_leaf:
            raise ValueError(f"Cannot set a sub-criteria comparison matrix for a leaf node ('{parent_name}').")
        if not isinstance(matrix, JudgmentMatrix):
            matrix = JudgmentMatrix(matrix)
        if matrix.size != len(parent_node.children):
            raise InvalidGroupSize(f"Matrix dimensions ({matrix.size}) do not match the number of children "
                                   f"({len(parent_node.children)}) for parent '{parent_name}'.")
        matrix = matrix.with_labels([child.name for child in parent_node.children])
        matrix.require_consistent(threshold)

        parent_node.comparison_matrix = matrix
        for child, weight in zip(parent_node.children, matrix.priority_vector()):
            child.set_local_weight(weight)
        # Groups set before their ancestors are picked up when the ancestor's group is set.
        if parent_node.global_weight is not None:
            WeightPropagator.propagate(parent_node)

    def recalculate_global_weights(self):
        """
        Recomputes every global weight from the current local weights in one
        top-down pass.
        """
        WeightPropagator.propagate(self.root)

    def get_criteria_weights(self) -> Dict[str, float]:
        """
        Returns the global weights of all leaf criteria, in discovery order.
        """
        weights = {}
        for leaf in self.leaves:
            if leaf.global_weight is None:
                raise RuntimeError(f"Global weight of '{leaf.name}' has not been calculated yet.")
            weights[leaf.name] = leaf.global_weight
        return weights

    def get_child_weights(self, parent_name: str, weight_type: str = "local") -> Dict[str, float]:
        """
        Returns the weights of the children of a specified parent node.

        Args:
            parent_name: The name of the parent node.
            weight_type: 'local' (relative to the parent, sums to 1) or
                         'global' (relative to the goal).
        """
        if weight_type not in ("local", "global"):
            raise ValueError("weight_type must be 'local' or 'global'.")
        parent_node = self._require_node(parent_name)
        return {child.name: getattr(child, f"{weight_type}_weight") for child in parent_node.children}

    # --- Alternatives ---

    def set_alternative_matrix(self, criterion_name: str, matrix: JudgmentMatrix | Sequence[Sequence[float]],
                               threshold: float | None = None):
        """
        Sets the judgment matrix for the alternatives with respect to a
        specific leaf criterion.

        Raises:
            InvalidGroupSize: If the matrix size differs from the number of alternatives.
            InconsistentJudgments: If the matrix is rejected.
        """
        criterion_node = self._require_node(criterion_name)
        if not criterion_node.is_leaf:
            raise ValueError(f"Can only set an alternative matrix for a leaf node criterion. '{criterion_name}' has children.")
        if not isinstance(matrix, JudgmentMatrix):
            matrix = JudgmentMatrix(matrix)
        if matrix.size != len(self.alternatives):
            raise InvalidGroupSize(f"Alternative matrix dimensions ({matrix.size}) do not match the number of "
                                   f"alternatives ({len(self.alternatives)}).")
        matrix = matrix.with_labels(self.alternatives)
        matrix.require_consistent(threshold)
        criterion_node.alternative_matrix = matrix

    def rank_alternatives(self) -> Dict[str, float]:
        """
        Scores the alternatives from the matrices set on every leaf.

        Returns:
            The mapping of alternative name to final score.
        """
        from .aggregation import AlternativeAggregator

        if not self.alternatives:
            raise ValueError("No alternatives in the model to rank.")
        self.scores = AlternativeAggregator.aggregate_matrices(self.leaves, self.alternatives)
        return self.scores

    def get_rankings(self) -> List[Tuple[str, float]]:
        """
        Returns a list of (alternative_name, score) sorted by score, best first.
        """
        if not self.scores:
            raise RuntimeError("Scores not calculated. Run `rank_alternatives()` first.")
        return sorted(self.scores.items(), key=lambda x: x[1], reverse=True)

    # --- Reporting ---

    def check_consistency(self, threshold: float | None = None) -> Dict[str, Dict[str, Any]]:
        """Reports the consistency ratio of every stored matrix."""
        from .consistency import Consistency
        return Consistency.check_model_consistency(self, threshold)

    def to_dict(self) -> Dict[str, Any]:
        """Serializes the weighted tree, the alternatives and the scores."""
        return {
            "hierarchy": self.root.to_dict(),
            "alternatives": list(self.alternatives),
            "scores": dict(self.scores),
        }

    def to_dataframe(self) -> 'pd.DataFrame':
        """
        Exports the hierarchy structure and weights to a pandas DataFrame,
        one row per node in pre-order.
        """
        _check_pandas_availability()

        data = []
        for node in self.get_all_nodes():
            data.append({
                'name': node.name,
                'parent': node.parent.name if node.parent else None,
                'depth': node.depth,
                'is_leaf': node.is_leaf,
                'local_weight': node.local_weight,
                'global_weight': node.global_weight,
                'consistency_ratio': node.consistency_ratio,
            })
        return pd.DataFrame(data)
