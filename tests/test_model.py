"""
===================================================================
Tests for the Model Module
===================================================================

Unit tests for the core data structures, Node and Hierarchy, and for
the WeightPropagator that links them.
"""

import gc

import pytest

from crispAHPy.exceptions import InconsistentJudgments, InvalidGroupSize
from crispAHPy.matrix_builder import JudgmentMatrix
from crispAHPy.model import Hierarchy, Node
from crispAHPy.propagation import WeightPropagator


@pytest.fixture
def sample_model() -> Hierarchy:
    """
    Goal -> Cost (Price, Maintenance), Quality; two alternatives; every
    matrix set.
    """
    model = Hierarchy()
    model.add_criteria("Root", ["Cost", "Quality"])
    model.add_criteria("Cost", ["Price", "Maintenance"])
    model.add_alternative("Option A")
    model.add_alternative("Option B")

    model.set_comparison_matrix("Root", [[1, 3], [1/3, 1]])
    model.set_comparison_matrix("Cost", [[1, 1], [1, 1]])

    model.set_alternative_matrix("Price", [[1, 1/4], [4, 1]])
    model.set_alternative_matrix("Maintenance", [[1, 1], [1, 1]])
    model.set_alternative_matrix("Quality", [[1, 4], [1/4, 1]])
    return model


# --- Node ---

def test_node_creation_and_parenting():
    parent = Node("P1")
    child = Node("C1")
    parent.add_child(child)

    assert parent.children == [child]
    assert child.parent is parent
    assert parent.is_leaf is False
    assert child.is_leaf is True
    assert child.depth == 1

def test_node_name_is_read_only():
    node = Node("Cost")
    with pytest.raises(AttributeError):
        node.name = "Price"

def test_empty_name_is_refused():
    with pytest.raises(ValueError):
        Node("")

def test_parent_reference_is_not_owning():
    child = Node("child")
    parent = Node("parent")
    parent.add_child(child)
    del parent
    gc.collect()
    assert child.parent is None

def test_root_follows_parent_links():
    root, child, grandchild = Node("root"), Node("child"), Node("grandchild")
    root.add_child(child)
    child.add_child(grandchild)
    assert grandchild.root is root
    assert root.root is root

def test_set_local_weight_does_not_touch_global_or_children():
    parent = Node("P")
    child = Node("C")
    parent.add_child(child)
    parent.set_local_weight(0.4)
    assert parent.local_weight == 0.4
    assert parent.global_weight is None
    assert child.local_weight == 1.0
    assert child.global_weight is None

def test_leaves_in_discovery_order():
    root = Node("root")
    a, b, a1, a2 = Node("a"), Node("b"), Node("a1"), Node("a2")
    root.add_child(a)
    root.add_child(b)
    a.add_child(a1)
    a.add_child(a2)
    assert [leaf.name for leaf in root.get_all_leaf_nodes()] == ["a1", "a2", "b"]
    assert [n.name for n in root.get_all_nodes()] == ["root", "a", "a1", "a2", "b"]


# --- WeightPropagator ---

def test_grandchild_global_weight():
    root, child, grandchild = Node("root"), Node("child"), Node("grandchild")
    root.add_child(child)
    child.add_child(grandchild)
    child.set_local_weight(0.6)
    grandchild.set_local_weight(0.5)

    WeightPropagator.propagate(root)

    assert root.global_weight == 1.0
    assert child.global_weight == pytest.approx(0.6)
    assert grandchild.global_weight == pytest.approx(0.3)

def test_propagate_group_requires_resolved_parent():
    root, child, grandchild = Node("root"), Node("child"), Node("grandchild")
    root.add_child(child)
    child.add_child(grandchild)
    with pytest.raises(RuntimeError, match="no global weight"):
        WeightPropagator.propagate_group(child)

def test_incremental_group_propagation():
    root, a, b = Node("root"), Node("a"), Node("b")
    root.add_child(a)
    root.add_child(b)
    a.set_local_weight(0.25)
    b.set_local_weight(0.75)
    WeightPropagator.propagate_group(root)
    assert (a.global_weight, b.global_weight) == (0.25, 0.75)

def test_propagating_a_detached_subtree_keeps_its_weight():
    root, cost, price = Node("root"), Node("Cost"), Node("Price")
    root.add_child(cost)
    cost.add_child(price)
    cost.set_local_weight(0.4)
    price.set_local_weight(0.5)
    WeightPropagator.propagate(root)

    del root
    gc.collect()
    assert cost.parent is None

    WeightPropagator.propagate(cost)
    assert cost.global_weight == pytest.approx(0.4)
    assert price.global_weight == pytest.approx(0.2)


# --- Hierarchy ---

def test_hierarchy_initialization():
    model = Hierarchy()
    assert model.root.name == "Root"
    assert model.root.global_weight == 1.0
    assert not model.alternatives

def test_duplicate_alternative_is_refused():
    model = Hierarchy()
    model.add_alternative("A")
    with pytest.raises(ValueError, match="already exists"):
        model.add_alternative("A")

def test_find_node(sample_model):
    assert sample_model._find_node("Root") is sample_model.root
    assert sample_model._find_node("Price").parent.name == "Cost"
    assert sample_model._find_node("FakeNode") is None

def test_weights_after_setting_matrices(sample_model):
    assert sample_model.get_child_weights("Root") == pytest.approx({"Cost": 0.75, "Quality": 0.25})
    assert sample_model.get_criteria_weights() == pytest.approx(
        {"Price": 0.375, "Maintenance": 0.375, "Quality": 0.25})
    assert sum(sample_model.get_criteria_weights().values()) == pytest.approx(1.0)

def test_groups_can_be_set_bottom_up():
    model = Hierarchy()
    model.add_criteria("Root", ["Cost", "Quality"])
    model.add_criteria("Cost", ["Price", "Maintenance"])
    model.set_comparison_matrix("Cost", [[1, 3], [1/3, 1]])
    assert model._find_node("Price").global_weight is None

    model.set_comparison_matrix("Root", [[1, 1], [1, 1]])
    assert model.get_child_weights("Cost", "global") == pytest.approx({"Price": 0.375, "Maintenance": 0.125})

def test_matrix_size_must_match_children(sample_model):
    with pytest.raises(InvalidGroupSize, match="do not match the number of children"):
        sample_model.set_comparison_matrix("Cost", [[1, 1, 1], [1, 1, 1], [1, 1, 1]])

def test_rejected_matrix_leaves_weights_unchanged(sample_model):
    with pytest.raises(InconsistentJudgments):
        sample_model.set_comparison_matrix("Cost", [[1, 3], [3, 1]])
    assert sample_model.get_child_weights("Cost") == pytest.approx({"Price": 0.5, "Maintenance": 0.5})
    assert sample_model.get_child_weights("Root") == pytest.approx({"Cost": 0.75, "Quality": 0.25})

def test_rejected_matrix_keeps_the_callers_labels(sample_model):
    matrix = JudgmentMatrix([[1, 3], [3, 1]], labels=["x", "y"])
    with pytest.raises(InconsistentJudgments):
        sample_model.set_comparison_matrix("Cost", matrix)
    assert matrix.labels == ["x", "y"]

def test_accepted_matrix_is_stored_under_the_children_names(sample_model):
    matrix = JudgmentMatrix([[1, 2], [1/2, 1]])
    sample_model.set_comparison_matrix("Cost", matrix)
    assert matrix.labels == ["item_1", "item_2"]
    assert sample_model._find_node("Cost").comparison_matrix.labels == ["Price", "Maintenance"]

    alternatives = JudgmentMatrix([[1, 1], [1, 1]])
    sample_model.set_alternative_matrix("Quality", alternatives)
    assert alternatives.labels == ["item_1", "item_2"]
    assert sample_model._find_node("Quality").alternative_matrix.labels == ["Option A", "Option B"]

def test_criteria_names_are_unique_across_the_hierarchy(sample_model):
    with pytest.raises(ValueError, match="'Root' already exists"):
        sample_model.add_criteria("Quality", ["Durability", "Root"])
    with pytest.raises(ValueError, match="'Price' already exists"):
        sample_model.add_criteria("Quality", ["Price", "Durability"])
    assert sample_model._find_node("Quality").is_leaf

def test_alternative_matrix_only_on_leaves(sample_model):
    with pytest.raises(ValueError, match="leaf node"):
        sample_model.set_alternative_matrix("Cost", [[1, 1], [1, 1]])

def test_rank_alternatives(sample_model):
    scores = sample_model.rank_alternatives()
    # A: 0.375*0.2 + 0.375*0.5 + 0.25*0.8 = 0.4625
    assert scores["Option A"] == pytest.approx(0.4625)
    assert scores["Option B"] == pytest.approx(0.5375)
    assert sample_model.get_rankings()[0][0] == "Option B"

def test_rankings_before_scoring():
    with pytest.raises(RuntimeError, match="Scores not calculated"):
        Hierarchy().get_rankings()

def test_recalculate_global_weights(sample_model):
    sample_model._find_node("Cost").set_local_weight(0.5)
    sample_model._find_node("Quality").set_local_weight(0.5)
    sample_model.recalculate_global_weights()
    assert sample_model._find_node("Price").global_weight == pytest.approx(0.25)

def test_check_consistency(sample_model):
    report = sample_model.check_consistency()
    assert set(report) == {"Root", "Cost", "Price (alternatives)",
                           "Maintenance (alternatives)", "Quality (alternatives)"}
    assert all(entry["is_consistent"] for entry in report.values())

def test_to_dict(sample_model):
    data = sample_model.to_dict()
    assert data["alternatives"] == ["Option A", "Option B"]
    cost = data["hierarchy"]["children"][0]
    assert cost["name"] == "Cost"
    assert cost["global_weight"] == pytest.approx(0.75)
    assert [c["name"] for c in cost["children"]] == ["Price", "Maintenance"]

def test_to_dataframe(sample_model):
    pytest.importorskip("pandas")
    df = sample_model.to_dataframe()
    assert list(df["name"]) == ["Root", "Cost", "Price", "Maintenance", "Quality"]
    assert df.loc[df["name"] == "Price", "global_weight"].iloc[0] == pytest.approx(0.375)
    assert df.loc[df["name"] == "Price", "parent"].iloc[0] == "Cost"
