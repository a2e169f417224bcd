class AHPError(Exception):
    """Base class for all errors raised by crispAHPy."""


class InvalidGroupSize(AHPError, ValueError):
    """A sibling group or the alternatives list has a size outside the allowed bounds."""


class MalformedJudgmentRow(AHPError, ValueError):
    """A row of judgments has the wrong length or holds a non-positive value."""


class InconsistentJudgments(AHPError):
    """The consistency ratio of a judgment matrix is above the threshold."""

    def __init__(self, message: str, consistency_ratio: float | None = None):
        super().__init__(message)
        self.consistency_ratio = consistency_ratio


class InvalidJudgments(AHPError, ValueError):
    """The judgment matrix cannot be evaluated at all (zero column sum, wrong shape)."""


class SessionAborted(AHPError):
    """A top-level count check failed and the whole session is abandoned."""


class SourceExhausted(AHPError):
    """A scripted judgment source was asked for more input than it holds."""
