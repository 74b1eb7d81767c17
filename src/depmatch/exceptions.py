"""Exception hierarchy for the dependency pattern engine."""

from typing import Optional


class DepmatchError(Exception):
    """Base class for all errors raised by depmatch."""


class InvalidPatternError(DepmatchError, ValueError):
    """A pattern or matcher was constructed in violation of its invariants.

    Raised when matchers do not alternate between node and edge matchers, or
    when a conjunctive node matcher has fewer than two members or a nested
    conjunction.
    """


class PatternSyntaxError(DepmatchError, ValueError):
    """Pattern text could not be compiled.

    Parameters
    ----------
    message : str
        Human-readable description of the problem
    token : Optional[str]
        The offending piece of pattern text, if known
    position : Optional[int]
        Character offset of ``token`` within the pattern text
    """

    def __init__(
        self,
        message: str,
        token: Optional[str] = None,
        position: Optional[int] = None,
    ):
        self.message = message
        self.token = token
        self.position = position

        details = message
        if token is not None:
            details += f" (at {token!r}"
            if position is not None:
                details += f", position {position}"
            details += ")"
        super().__init__(details)


class GraphError(DepmatchError, ValueError):
    """A graph was built or queried with vertices it does not contain."""
