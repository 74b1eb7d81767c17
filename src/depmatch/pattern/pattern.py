"""Patterns and the backtracking graph search.

A pattern is a sequence of matchers that alternates between node matchers
and edge matchers, starting and ending with a node matcher. Searching a graph
from a vertex walks the pattern left to right: node matchers test the
current vertex, edge matchers move to a neighbor over an edge that has not
been used yet in the current match. Every way of satisfying the whole pattern
is reported.
"""

import logging
from itertools import islice
from typing import Dict, Generic, Hashable, Iterator, List, Optional, Sequence, Tuple, TypeVar

from ..config import DEFAULT_MAX_MATCHES
from ..exceptions import InvalidPatternError
from ..graph import Bipath, DirectedEdge, Graph
from .match import EdgeGroup, Match, NodeGroup
from .matchers import (
    BaseEdgeMatcher,
    BaseNodeMatcher,
    CaptureEdgeMatcher,
    CaptureNodeMatcher,
    EdgeMatcher,
    Matcher,
    NodeMatcher,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


class Pattern(Generic[T]):
    """A pattern with which graphs can be searched.

    Parameters
    ----------
    matchers : Sequence[Matcher]
        Matchers alternating between ``NodeMatcher`` and ``EdgeMatcher``,
        starting and ending with a ``NodeMatcher``

    Raises
    ------
    InvalidPatternError
        If the matchers are empty or do not alternate
    """

    def __init__(self, matchers: Sequence[Matcher[T]]):
        matchers = tuple(matchers)
        if not matchers:
            raise InvalidPatternError("A pattern needs at least one node matcher")

        for i, matcher in enumerate(matchers):
            expected = NodeMatcher if i % 2 == 0 else EdgeMatcher
            if not isinstance(matcher, expected):
                raise InvalidPatternError(
                    f"Matchers must start with a node matcher and alternate; "
                    f"position {i} holds {type(matcher).__name__}, expected {expected.__name__}"
                )
        if not isinstance(matchers[-1], NodeMatcher):
            raise InvalidPatternError("Matchers must end with a node matcher")

        self._matchers: Tuple[Matcher[T], ...] = matchers

    @classmethod
    def interleave(
        cls,
        node_matchers: Sequence[NodeMatcher[T]],
        edge_matchers: Sequence[EdgeMatcher[T]],
    ) -> "Pattern[T]":
        """Build a pattern from separate node and edge matcher lists.

        The result alternates ``node_matchers[0], edge_matchers[0],
        node_matchers[1], ...``. Validation is left to the constructor, so a
        mismatched pair of lists is rejected the same way a badly ordered
        matcher list is.
        """
        matchers: List[Matcher[T]] = []
        for i, node_matcher in enumerate(node_matchers):
            matchers.append(node_matcher)
            if i < len(edge_matchers):
                matchers.append(edge_matchers[i])
        matchers.extend(edge_matchers[len(node_matchers):])
        return cls(matchers)

    @property
    def matchers(self) -> Tuple[Matcher[T], ...]:
        return self._matchers

    @property
    def node_matchers(self) -> Tuple[NodeMatcher[T], ...]:
        """Just the node matchers, in order."""
        return tuple(m for m in self._matchers if isinstance(m, NodeMatcher))

    @property
    def edge_matchers(self) -> Tuple[EdgeMatcher[T], ...]:
        """Just the edge matchers, in order."""
        return tuple(m for m in self._matchers if isinstance(m, EdgeMatcher))

    @property
    def base_node_matchers(self) -> Tuple[BaseNodeMatcher[T], ...]:
        return tuple(b for m in self.node_matchers for b in m.base_node_matchers)

    @property
    def base_edge_matchers(self) -> Tuple[BaseEdgeMatcher[T], ...]:
        return tuple(m.base_edge_matcher for m in self.edge_matchers)

    def reflection(self) -> "Pattern[T]":
        """The pattern that matches the same structures searched from the other end."""
        return Pattern(
            m.flip() if isinstance(m, EdgeMatcher) else m
            for m in reversed(self._matchers)
        )

    def search(
        self,
        graph: Graph[T],
        vertex: Optional[T] = None,
        max_matches: Optional[int] = DEFAULT_MAX_MATCHES,
    ) -> List[Match[T]]:
        """Find matches of this pattern in ``graph``.

        Parameters
        ----------
        graph : Graph
            Graph to search
        vertex : Optional[T]
            Anchor vertex; when omitted every vertex is tried in the graph's
            enumeration order
        max_matches : Optional[int]
            Stop after this many matches (None = all)

        Returns
        -------
        List[Match]
            Matches in search order; empty if there are none

        Raises
        ------
        ValueError
            If ``max_matches`` is negative
        GraphError
            If ``vertex`` is not in ``graph``
        """
        if max_matches is not None and max_matches < 0:
            raise ValueError(f"max_matches must be non-negative, got {max_matches}")
        found = self.iter_matches(graph, vertex)
        if max_matches is not None:
            found = islice(found, max_matches)
        matches = list(found)
        logger.debug("Pattern %s: %d match(es)", self, len(matches))
        return matches

    __call__ = search

    def iter_matches(self, graph: Graph[T], vertex: Optional[T] = None) -> Iterator[Match[T]]:
        """Lazily yield matches, anchored at ``vertex`` or at every vertex."""
        if vertex is None:
            for v in graph.vertices:
                yield from self._search(graph, 0, v, (), {}, {})
        else:
            # raises GraphError for an unknown anchor
            graph.incident_edges(vertex)
            yield from self._search(graph, 0, vertex, (), {}, {})

    def _search(
        self,
        graph: Graph[T],
        position: int,
        vertex: T,
        edges: Tuple[DirectedEdge[T], ...],
        node_groups: Dict[str, NodeGroup[T]],
        edge_groups: Dict[str, EdgeGroup[T]],
    ) -> Iterator[Match[T]]:
        if position == len(self._matchers):
            yield Match(self, Bipath(edges), node_groups, edge_groups)
            return

        matcher = self._matchers[position]

        if isinstance(matcher, NodeMatcher):
            text = matcher.match_text(vertex)
            if text is None:
                return
            if isinstance(matcher, CaptureNodeMatcher):
                node_groups = {**node_groups, matcher.alias: NodeGroup(vertex, text)}
            yield from self._search(graph, position + 1, vertex, edges, node_groups, edge_groups)
            return

        # an edge and its reverse are the same resource
        used = {e.edge for e in edges}
        for dedge in graph.incident_edges(vertex):
            if dedge.edge in used:
                continue
            text = matcher.match_text(dedge)
            if text is None:
                continue
            groups = edge_groups
            if isinstance(matcher, CaptureEdgeMatcher):
                groups = {**edge_groups, matcher.alias: EdgeGroup(dedge, text)}
            yield from self._search(
                graph, position + 1, dedge.end, edges + (dedge,), node_groups, groups
            )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Pattern):
            return NotImplemented
        return self._matchers == other._matchers

    def __hash__(self) -> int:
        return hash(self._matchers)

    def __len__(self) -> int:
        return len(self._matchers)

    def __iter__(self) -> Iterator[Matcher[T]]:
        return iter(self._matchers)

    def __str__(self) -> str:
        return " ".join(str(m) for m in self._matchers)

    def __repr__(self) -> str:
        return f"Pattern({str(self)!r})"

