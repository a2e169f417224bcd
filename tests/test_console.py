"""
===================================================================
Tests for the Console Judgment Source and Command Line Entry Point
===================================================================
"""

import pytest

from crispAHPy.__main__ import main
from crispAHPy.console import ConsoleSource, parse_judgment, split_labels
from crispAHPy.elicitation import JudgmentSource, LabelKind


class FakeConsole:
    """Feeds canned lines to `input` and records everything shown."""
    def __init__(self, lines):
        self.lines = list(lines)
        self.prompts = []
        self.output = []

    def input(self, prompt=""):
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)

    def print(self, message=""):
        self.output.append(message)

    def source(self):
        return ConsoleSource(input_func=self.input, output_func=self.print)


@pytest.mark.parametrize("text, expected", [
    ("3", 3.0),
    ("1/3", 1 / 3),
    ("0.5", 0.5),
    (" 2/4 ", 0.5),
])
def test_parse_judgment(text, expected):
    assert parse_judgment(text) == pytest.approx(expected)

@pytest.mark.parametrize("text", ["x", "1/0", ""])
def test_parse_judgment_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_judgment(text)

def test_split_labels():
    assert split_labels("Price, Quality ,, Comfort") == ["Price", "Quality", "Comfort"]
    assert split_labels("") == []
    assert split_labels(None) == []

def test_console_source_is_a_judgment_source():
    assert isinstance(ConsoleSource(), JudgmentSource)

def test_request_labels():
    console = FakeConsole(["Car A, Car B"])
    labels = console.source().request_labels(LabelKind.ALTERNATIVES, None)
    assert labels == ["Car A", "Car B"]
    assert "alternatives" in console.output[0]

def test_empty_sub_criteria_answer_makes_a_leaf():
    console = FakeConsole([""])
    assert console.source().request_labels(LabelKind.SUB_CRITERIA, "Price") == []
    assert console.output[-1] == "Price is rendered sub-strata-less."

def test_begin_group_prints_header():
    console = FakeConsole([])
    console.source().begin_group("Fill in the judgments of the Root level:", ["A", "B"])
    assert console.output == ["\nFill in the judgments of the Root level:", "\tA\tB"]

def test_judgment_row_reprompts_on_unreadable_input():
    console = FakeConsole(["1 three", "1 1/3"])
    row = console.source().request_judgment_row("A", 2)
    assert row == pytest.approx([1.0, 1 / 3])
    assert console.prompts == ["A\t", "A\t"]
    assert console.output[0].startswith("Could not read the judgments")

def test_main_runs_a_whole_session(capsys):
    console = FakeConsole([
        "A, B",         # alternatives
        "C1, C2",       # top-level criteria
        "1 3", "1/3 1", # C1 vs C2
        "", "",         # no sub-criteria
        "1 4", "1/4 1", # alternatives under C1
        "1 2/3", "3/2 1",
    ])
    assert main(["--quiet"], source=console.source()) == 0

    out = capsys.readouterr().out
    assert "Finalized estimates of the alternatives:" in out
    assert "C1 ( 0.750 )" in out
    assert "--- Building Hierarchy ---" not in out

def test_main_reports_an_aborted_session(capsys):
    console = FakeConsole(["Only one"])
    assert main(["--quiet"], source=console.source()) == 1
    assert "at least 2 alternatives" in capsys.readouterr().out

def test_main_depth_option():
    console = FakeConsole([
        "A, B",
        "C1, C2",
        "1 1", "1 1",
        "1 1", "1 1",   # no sub-criteria questions with two levels
        "1 1", "1 1",
    ])
    assert main(["--quiet", "--max-depth", "2"], source=console.source()) == 0
    assert console.lines == []

def test_main_refuses_a_depth_without_criteria(capsys):
    console = FakeConsole([])
    assert main(["--quiet", "--max-depth", "1"], source=console.source()) == 1
    assert "--max-depth must be at least 2" in capsys.readouterr().out
    assert console.prompts == []

def test_main_reports_input_ending_early(capsys):
    console = FakeConsole(["A, B", "C1, C2", "1 3"])
    assert main(["--quiet"], source=console.source()) == 1
    assert "Input ended before the session was complete." in capsys.readouterr().out
