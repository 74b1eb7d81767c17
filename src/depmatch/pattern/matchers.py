"""Node and edge matchers.

Matchers come in two disjoint families. ``NodeMatcher``s test vertices and
``EdgeMatcher``s test directed edges. Each family has base matchers that
perform an actual test and wrapping matchers that hold exactly one inner
matcher and add behavior on top of it (capturing, direction constraints).

Every matcher reports ``match_text``: ``None`` when it does not match, or
the text it matched. The text is what gets recorded when a capturing matcher
succeeds.
"""

import re
from abc import ABC, abstractmethod
from typing import Callable, Generic, Hashable, Iterable, Optional, Tuple, TypeVar

from ..config import TRIVIAL_NODE_TEXT
from ..exceptions import InvalidPatternError
from ..graph import Direction, DirectedEdge, Edge

T = TypeVar("T", bound=Hashable)

UNDIRECTED_SYMBOL = "-"


class Matcher(ABC, Generic[T]):
    """Abstract superclass for all matchers."""

    @abstractmethod
    def match_text(self, target) -> Optional[str]:
        """Return the matched text, or None if ``target`` does not match."""

    def matches(self, target) -> bool:
        return self.match_text(target) is not None

    def __call__(self, target) -> Optional[str]:
        return self.match_text(target)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


# ---------------------------------------------------------------------------
# Edge matchers
# ---------------------------------------------------------------------------


class EdgeMatcher(Matcher[T]):
    """Matches directed edges of a dependency graph."""

    @abstractmethod
    def match_text(self, edge: DirectedEdge[T]) -> Optional[str]:
        pass

    def can_match(self, edge: Edge[T]) -> bool:
        """True if either directed view of ``edge`` matches."""
        return self.matches(DirectedEdge.up(edge)) or self.matches(DirectedEdge.down(edge))

    @abstractmethod
    def flip(self) -> "EdgeMatcher[T]":
        """The matcher that accepts the same edges traversed the other way."""

    @property
    @abstractmethod
    def base_edge_matcher(self) -> "BaseEdgeMatcher[T]":
        """The innermost test beneath any wrapping matchers."""

    @property
    def symbol(self) -> str:
        """Delimiter of this matcher in pattern text."""
        return UNDIRECTED_SYMBOL

    @abstractmethod
    def body(self) -> str:
        """Pattern text between the delimiters."""

    def __str__(self) -> str:
        return self.symbol + self.body() + self.symbol


class BaseEdgeMatcher(EdgeMatcher[T]):
    """An edge matcher that performs a test itself."""

    def flip(self) -> "BaseEdgeMatcher[T]":
        return self

    @property
    def base_edge_matcher(self) -> "BaseEdgeMatcher[T]":
        return self


class TrivialEdgeMatcher(BaseEdgeMatcher[T]):
    """Matches any edge. The matched text is the edge label."""

    def match_text(self, edge: DirectedEdge[T]) -> Optional[str]:
        return edge.label

    def body(self) -> str:
        return ".*"

    def __eq__(self, other: object) -> bool:
        return type(other) is TrivialEdgeMatcher

    def __hash__(self) -> int:
        return hash(".*")


class LabelEdgeMatcher(BaseEdgeMatcher[T]):
    """Matches edges with exactly the given label."""

    def __init__(self, label: str):
        self.label = label

    def match_text(self, edge: DirectedEdge[T]) -> Optional[str]:
        return edge.label if edge.label == self.label else None

    def body(self) -> str:
        return self.label

    def __eq__(self, other: object) -> bool:
        return type(other) is LabelEdgeMatcher and self.label == other.label

    def __hash__(self) -> int:
        return hash(("label", self.label))


class RegexEdgeMatcher(BaseEdgeMatcher[T]):
    """Matches edges whose whole label matches a regular expression."""

    def __init__(self, regex: str):
        self.regex = re.compile(regex)

    def match_text(self, edge: DirectedEdge[T]) -> Optional[str]:
        return edge.label if self.regex.fullmatch(edge.label) else None

    def body(self) -> str:
        return "/" + self.regex.pattern + "/"

    def __eq__(self, other: object) -> bool:
        return type(other) is RegexEdgeMatcher and self.regex.pattern == other.regex.pattern

    def __hash__(self) -> int:
        return hash(("regex", self.regex.pattern))


class WrappedEdgeMatcher(EdgeMatcher[T]):
    """An edge matcher that delegates its test to ``matcher``."""

    def __init__(self, matcher: EdgeMatcher[T]):
        self.matcher = matcher

    def _reject_inner_capture(self) -> None:
        # the search only records captures on the outermost matcher
        inner = self.matcher
        while isinstance(inner, WrappedEdgeMatcher):
            if isinstance(inner, CaptureEdgeMatcher):
                raise InvalidPatternError(
                    f"Edge capture {{{inner.alias}}} must be the outermost matcher, "
                    f"not wrapped by {type(self).__name__}"
                )
            inner = inner.matcher

    @property
    def base_edge_matcher(self) -> BaseEdgeMatcher[T]:
        return self.matcher.base_edge_matcher


class DirectedEdgeMatcher(WrappedEdgeMatcher[T]):
    """Only accepts edges traversed in ``direction``.

    The inner matcher is not consulted for edges going the other way.
    It may not wrap a ``CaptureEdgeMatcher``; wrap the capture around it
    instead.
    """

    def __init__(self, direction: Direction, matcher: EdgeMatcher[T]):
        super().__init__(matcher)
        self.direction = direction
        self._reject_inner_capture()

    def match_text(self, edge: DirectedEdge[T]) -> Optional[str]:
        if edge.direction is not self.direction:
            return None
        return self.matcher.match_text(edge)

    def flip(self) -> "DirectedEdgeMatcher[T]":
        return DirectedEdgeMatcher(self.direction.flip(), self.matcher)

    @property
    def symbol(self) -> str:
        return self.direction.symbol

    def body(self) -> str:
        return self.matcher.body()

    def __eq__(self, other: object) -> bool:
        return (
            type(other) is DirectedEdgeMatcher
            and self.direction is other.direction
            and self.matcher == other.matcher
        )

    def __hash__(self) -> int:
        return hash(self.direction) + 39 * hash(self.matcher)


class CaptureEdgeMatcher(WrappedEdgeMatcher[T]):
    """Records a matched edge under ``alias``.

    Captures are always the outermost matcher of an edge.
    """

    def __init__(self, alias: str, matcher: Optional[EdgeMatcher[T]] = None):
        super().__init__(matcher if matcher is not None else TrivialEdgeMatcher())
        self.alias = alias
        self._reject_inner_capture()

    def match_text(self, edge: DirectedEdge[T]) -> Optional[str]:
        return self.matcher.match_text(edge)

    def flip(self) -> "CaptureEdgeMatcher[T]":
        return CaptureEdgeMatcher(self.alias, self.matcher.flip())

    @property
    def symbol(self) -> str:
        return self.matcher.symbol

    def body(self) -> str:
        inner = self.matcher.body()
        if inner == TrivialEdgeMatcher().body():
            return "{" + self.alias + "}"
        return "{" + self.alias + ":" + inner + "}"

    def __eq__(self, other: object) -> bool:
        return (
            type(other) is CaptureEdgeMatcher
            and self.alias == other.alias
            and self.matcher == other.matcher
        )

    def __hash__(self) -> int:
        return hash(self.alias) + 39 * hash(self.matcher)


# ---------------------------------------------------------------------------
# Node matchers
# ---------------------------------------------------------------------------


class NodeMatcher(Matcher[T]):
    """Matches vertices of a dependency graph."""

    @abstractmethod
    def match_text(self, node: T) -> Optional[str]:
        pass

    @property
    @abstractmethod
    def base_node_matchers(self) -> Tuple["BaseNodeMatcher[T]", ...]:
        """The unwrapped tests this matcher is made of."""


class BaseNodeMatcher(NodeMatcher[T]):
    """A node matcher that performs a test itself."""

    @property
    def base_node_matchers(self) -> Tuple["BaseNodeMatcher[T]", ...]:
        return (self,)


class TrivialNodeMatcher(BaseNodeMatcher[T]):
    """Matches any node."""

    def match_text(self, node: T) -> Optional[str]:
        return TRIVIAL_NODE_TEXT

    def __str__(self) -> str:
        return TRIVIAL_NODE_TEXT

    def __eq__(self, other: object) -> bool:
        return type(other) is TrivialNodeMatcher

    def __hash__(self) -> int:
        return hash(TRIVIAL_NODE_TEXT)


class ExpressionNodeMatcher(BaseNodeMatcher[T]):
    """Matches nodes accepted by an opaque predicate.

    Parameters
    ----------
    expression : str
        Source text of the predicate; used for rendering and equality
    predicate : Callable[[T], bool]
        The test itself
    """

    def __init__(self, expression: str, predicate: Callable[[T], bool]):
        self.expression = expression
        self.predicate = predicate

    def match_text(self, node: T) -> Optional[str]:
        return self.expression if self.predicate(node) else None

    def __str__(self) -> str:
        return self.expression

    def __eq__(self, other: object) -> bool:
        return type(other) is ExpressionNodeMatcher and self.expression == other.expression

    def __hash__(self) -> int:
        return hash(self.expression)


class WrappedNodeMatcher(NodeMatcher[T]):
    """A node matcher that delegates its test to ``matcher``."""

    def __init__(self, matcher: NodeMatcher[T]):
        self.matcher = matcher

    @property
    def base_node_matchers(self) -> Tuple[BaseNodeMatcher[T], ...]:
        return self.matcher.base_node_matchers


class CaptureNodeMatcher(WrappedNodeMatcher[T]):
    """Records a matched node under ``alias``.

    Without an inner matcher every node is captured.
    """

    def __init__(self, alias: str, matcher: Optional[NodeMatcher[T]] = None):
        super().__init__(matcher if matcher is not None else TrivialNodeMatcher())
        self.alias = alias
        if isinstance(self.matcher, CaptureNodeMatcher):
            raise InvalidPatternError(
                f"Node capture {{{self.matcher.alias}}} may not be wrapped by capture {{{alias}}}"
            )

    def match_text(self, node: T) -> Optional[str]:
        return self.matcher.match_text(node)

    def __str__(self) -> str:
        if isinstance(self.matcher, TrivialNodeMatcher):
            return "{" + self.alias + "}"
        return "{" + self.alias + ":" + str(self.matcher) + "}"

    def __eq__(self, other: object) -> bool:
        return (
            type(other) is CaptureNodeMatcher
            and self.alias == other.alias
            and self.matcher == other.matcher
        )

    def __hash__(self) -> int:
        return hash(self.alias) + 39 * hash(self.matcher)


class ConjunctiveNodeMatcher(NodeMatcher[T]):
    """Matches a node only if every member matcher does.

    The matched text is that of the first member in declaration order.
    Duplicate members are collapsed.

    Raises
    ------
    InvalidPatternError
        If fewer than two distinct members are given, a member is itself
        conjunctive (conjunctions must be flattened by the caller), or a
        member is a capture
    """

    def __init__(self, matchers: Iterable[NodeMatcher[T]]):
        members = tuple(dict.fromkeys(matchers))
        if len(members) < 2:
            raise InvalidPatternError(
                f"A conjunction needs at least two distinct matchers, got {len(members)}"
            )
        if any(isinstance(m, ConjunctiveNodeMatcher) for m in members):
            raise InvalidPatternError("Conjunctions may not be nested")
        for m in members:
            if isinstance(m, CaptureNodeMatcher):
                raise InvalidPatternError(
                    f"Node capture {{{m.alias}}} may not be a conjunction member; "
                    "capture the whole conjunction instead"
                )
        self.matchers = members

    def match_text(self, node: T) -> Optional[str]:
        text = None
        for matcher in self.matchers:
            member_text = matcher.match_text(node)
            if member_text is None:
                return None
            if text is None:
                text = member_text
        return text

    @property
    def base_node_matchers(self) -> Tuple[BaseNodeMatcher[T], ...]:
        return tuple(b for m in self.matchers for b in m.base_node_matchers)

    def __str__(self) -> str:
        return ":".join(str(m) for m in self.matchers)

    def __eq__(self, other: object) -> bool:
        return type(other) is ConjunctiveNodeMatcher and self.matchers == other.matchers

    def __hash__(self) -> int:
        return hash(self.matchers)
