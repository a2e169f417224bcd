from __future__ import annotations
from typing import TYPE_CHECKING, Callable, Iterable, List, Tuple
import numpy as np

try:
    import matplotlib.pyplot as plt
    _PLOT_AVAILABLE = True
except ImportError:
    _PLOT_AVAILABLE = False

if TYPE_CHECKING:
    from .model import Hierarchy, Node


# ==============================================================================
# 1. TEXT RENDERING
# ==============================================================================

def _weighted_label(node: Node) -> str:
    weight = node.global_weight if node.global_weight is not None else node.local_weight
    return f"{node.name} ( {weight:.3f} )"

def format_tree(nodes: Iterable[Node], message: Callable[[Node], str] | None = None, level: int = 0) -> str:
    """
    Renders nodes and their descendants, one per line, indented with a tab
    per level.

    Args:
        nodes: The nodes to render, usually `hierarchy.root.children`.
        message: Formats a single node. Defaults to the node name.
        level: Indentation of the first level.
    """
    message = message or (lambda node: node.name)
    lines: List[str] = []

    def _render(group: Iterable[Node], depth: int):
        for node in group:
            lines.append("\t" * depth + message(node))
            _render(node.children, depth + 1)

    _render(nodes, level)
    return "\n".join(lines)

def format_weighted_tree(model: Hierarchy) -> str:
    """Renders the criteria with their global weights."""
    return format_tree(model.root.children, _weighted_label)

def format_rankings(rankings: Iterable[Tuple[str, float]]) -> str:
    """Renders (alternative, score) pairs, one per line."""
    return "\n".join(f"{name} ( {score} )" for name, score in rankings)


# ==============================================================================
# 2. MATPLOTLIB PLOTTING FUNCTIONS
# ==============================================================================

def _check_plotting_availability():
    """Helper function to raise an error if plotting libraries are not installed."""
    if not _PLOT_AVAILABLE:
        raise ImportError("Plotting functionality requires matplotlib. "
                          "Please install it using: pip install matplotlib")

def plot_weights(model: Hierarchy, parent_name: str, figsize=(10, 6)) -> 'plt.Figure':
    """
    Plots the local weights of the children of a given parent node.

    Args:
        model: The Hierarchy instance.
        parent_name: The name of the parent node whose children's weights to plot.
        figsize: The size of the figure.

    Returns:
        The matplotlib Figure object.
    """
    _check_plotting_availability()

    parent_node = model._find_node(parent_name)
    if not parent_node or parent_node.is_leaf:
        raise ValueError(f"Node '{parent_name}' is not a valid parent or was not found.")

    labels = [child.name for child in parent_node.children]
    weights = [child.local_weight for child in parent_node.children]

    fig, ax = plt.subplots(figsize=figsize)
    bars = ax.bar(labels, weights, color=plt.cm.viridis(np.linspace(0, 1, len(labels))))

    ax.set_ylabel('Local Weight')
    ax.set_title(f'Local Weight Distribution for Children of "{parent_name}"')

    for bar in bars:
        yval = bar.get_height()
        ax.text(bar.get_x() + bar.get_width()/2.0, yval, f'{yval:.3f}', va='bottom', ha='center')

    fig.tight_layout()
    return fig

def plot_final_rankings(model: Hierarchy, figsize=(10, 6)) -> 'plt.Figure':
    """
    Plots the final rankings of the alternatives with their scores.

    Args:
        model: The fully calculated Hierarchy instance.
        figsize: The size of the figure.

    Returns:
        The matplotlib Figure object.
    """
    _check_plotting_availability()

    rankings = model.get_rankings()

    alt_names = [r[0] for r in rankings]
    scores = [r[1] for r in rankings]

    fig, ax = plt.subplots(figsize=figsize)
    bars = ax.barh(alt_names, scores, color=plt.cm.plasma(np.linspace(0.4, 0.9, len(scores))))

    ax.set_xlabel('Final Score')
    ax.set_ylabel('Alternative')
    ax.set_title('Final Alternative Rankings')
    ax.grid(axis='x', linestyle='--', alpha=0.6)
    ax.invert_yaxis()

    for i, bar in enumerate(bars):
        ax.text(bar.get_width() + 0.005, bar.get_y() + bar.get_height()/2,
                f'{scores[i]:.4f}', va='center')

    fig.tight_layout()
    return fig
