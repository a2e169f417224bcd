import pytest

from crispAHPy.config import configure_parameters
from crispAHPy.elicitation import ScriptedSource


@pytest.fixture(autouse=True)
def reset_configuration():
    """Every test starts from, and leaves behind, the default configuration."""
    configure_parameters.reset_to_defaults()
    yield
    configure_parameters.reset_to_defaults()

@pytest.fixture
def consistent_3x3_rows():
    """A perfectly consistent 3x3 matrix: priorities 4/7, 2/7, 1/7."""
    return [
        [1, 2, 4],
        [1/2, 1, 2],
        [1/4, 1/2, 1],
    ]

@pytest.fixture
def saaty_3x3_rows():
    """A classic, slightly inconsistent 3x3 matrix."""
    return [
        [1, 3, 5],
        [1/3, 1, 2],
        [1/5, 1/2, 1],
    ]

@pytest.fixture
def cyclic_3x3_rows():
    """A heavily inconsistent matrix: A > B > C > A."""
    return [
        [1, 9, 1/9],
        [1/9, 1, 9],
        [9, 1/9, 1],
    ]

@pytest.fixture
def two_criteria_source():
    """
    Script for the smallest complete session: two alternatives, two top-level
    criteria without sub-criteria.
    """
    return ScriptedSource(
        labels=[["A", "B"], ["C1", "C2"], [], []],
        rows=[
            [1, 3], [1/3, 1],        # C1 vs C2 -> 0.75, 0.25
            [1, 4], [1/4, 1],        # alternatives under C1 -> 0.8, 0.2
            [1, 2/3], [3/2, 1],      # alternatives under C2 -> 0.4, 0.6
        ],
    )
