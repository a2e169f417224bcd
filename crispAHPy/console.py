from __future__ import annotations
from fractions import Fraction
from typing import Callable, List, Optional, Sequence

from .config import configure_parameters
from .elicitation import LabelKind
from .validation import Rejection


def parse_judgment(text: str) -> float:
    """
    Parses a judgment typed by a user: an integer, a decimal or a fraction
    such as '1/3'.

    Raises:
        ValueError: If the text is not a number.
    """
    try:
        return float(Fraction(text.strip()))
    except ZeroDivisionError as e:
        raise ValueError(f"'{text}' divides by zero.") from e

def split_labels(line: str | None) -> List[str]:
    """Splits a comma separated line, dropping blanks."""
    if not line:
        return []
    return [part.strip() for part in line.split(",") if part.strip()]


class ConsoleSource:
    """
    Interactive judgment source reading from standard input.

    Args:
        input_func: Reads one line, given a prompt. Defaults to `input`.
        output_func: Writes one message. Defaults to `print`.
    """
    def __init__(self, input_func: Callable[[str], str] = input, output_func: Callable[[str], None] = print):
        self._input = input_func
        self._output = output_func

    def request_labels(self, kind: LabelKind, node_name: Optional[str]) -> List[str]:
        if kind == LabelKind.ALTERNATIVES:
            prompt = (f"How many alternatives do you have (from {configure_parameters.MIN_ALTERNATIVES} "
                      f"up to {configure_parameters.MAX_ALTERNATIVES})?\n"
                      "List them, each one separated with a comma(,):")
        elif kind == LabelKind.CRITERIA:
            prompt = (f"\nHow many top-level criteria do you want? (from {configure_parameters.MIN_TOP_CRITERIA} "
                      f"up to {configure_parameters.MAX_TOP_CRITERIA})?\n"
                      "List them, each one separated with a comma(,):")
        else:
            prompt = (f"\nDoes {node_name} have sub-criteria? (from {configure_parameters.MIN_GROUP_SIZE} "
                      f"up to {configure_parameters.MAX_GROUP_SIZE})?\n"
                      "List them, each one separated with a comma(,); or press 'Enter' to skip them:")
        self._output(prompt)
        labels = split_labels(self._input(""))
        if kind == LabelKind.SUB_CRITERIA and not labels:
            self._output(f"{node_name} is rendered sub-strata-less.")
        return labels

    def begin_group(self, title: str, labels: Sequence[str]) -> None:
        self._output(f"\n{title}")
        self._output("\t" + "\t".join(labels))

    def request_judgment_row(self, node_label: str, expected_count: int) -> List[float]:
        while True:
            tokens = self._input(f"{node_label}\t").split()
            try:
                return [parse_judgment(token) for token in tokens]
            except ValueError as e:
                self._output(f"Could not read the judgments: {e}")

    def report_rejection(self, reason: Rejection, message: str) -> None:
        self._output(message)
