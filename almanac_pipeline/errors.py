from __future__ import annotations


class AlmanacError(Exception):
    """Base class for everything the engine raises on bad input or state."""


class AlmanacParseError(AlmanacError, ValueError):
    def __init__(self, message: str, line_no: int | None = None, line: str | None = None):
        self.line_no = line_no
        self.line = line
        if line_no is not None:
            message = "line %d: %s (%r)" % (line_no, message, line)
        super().__init__(message)


class RuleOverlapError(AlmanacError, ValueError):
    def __init__(self, stage: str, first, second):
        self.stage = stage
        self.first = first
        self.second = second
        super().__init__(
            "stage %r has overlapping rule sources: %s and %s" % (stage, first, second)
        )


class EmptyResultError(AlmanacError, RuntimeError):
    pass


class VerificationError(AlmanacError, RuntimeError):
    """Interval answer disagrees with the per-value enumeration."""
