from __future__ import annotations
from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .model import Node


class WeightPropagator:
    """
    Turns local weights into global weights:

        child.global_weight = child.local_weight * parent.global_weight

    Parents are always resolved before their children. The root's global
    weight is fixed at 1.
    """

    @staticmethod
    def propagate_group(parent: Node):
        """
        Sets the global weights of one sibling group from its parent.

        A parentless node without a global weight is taken as the root and
        seeded with 1; a parent weight already resolved is kept as is.

        Raises:
            RuntimeError: If the parent's global weight has not been resolved.
        """
        if parent.global_weight is None and parent.parent is None:
            parent.global_weight = 1.0
        if parent.global_weight is None:
            raise RuntimeError(f"Cannot propagate weights: parent '{parent.name}' has no global weight yet.")

        for child in parent.children:
            child.global_weight = child.local_weight * parent.global_weight

    @staticmethod
    def propagate(start: Node):
        """
        Breadth-first pass setting the global weight of every node below `start`.

        `start` is normally the root; any other node must already carry its
        global weight.
        """
        queue = deque([start])
        while queue:
            node = queue.popleft()
            WeightPropagator.propagate_group(node)
            queue.extend(child for child in node.children if not child.is_leaf)
