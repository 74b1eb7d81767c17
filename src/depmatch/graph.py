"""Directed, edge-labeled multigraphs over an opaque vertex payload.

Dependency graphs are stored as labeled ``head -> dependent`` edges. The
search engine never walks those edges directly: it asks a vertex for its
incident edges and receives direction-relative views (``DirectedEdge``),
so that a pattern may climb from a dependent to its head (``UP``) as well as
descend from a head to a dependent (``DOWN``).
"""

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Generic, Hashable, Iterable, Iterator, List, Tuple, TypeVar

from .exceptions import GraphError

T = TypeVar("T", bound=Hashable)


class Direction(Enum):
    """Traversal direction of an edge relative to the vertex it is seen from."""

    UP = "up"
    DOWN = "down"

    def flip(self) -> "Direction":
        return Direction.DOWN if self is Direction.UP else Direction.UP

    @property
    def symbol(self) -> str:
        """Symbol used in the textual pattern language."""
        return "<" if self is Direction.UP else ">"


@dataclass(frozen=True)
class Edge(Generic[T]):
    """An underlying labeled edge from ``source`` (head) to ``dest`` (dependent)."""

    source: T
    dest: T
    label: str

    def __str__(self) -> str:
        return f"{self.label}({self.source}, {self.dest})"


@dataclass(frozen=True)
class DirectedEdge(Generic[T]):
    """An edge annotated with the direction it is traversed in.

    A ``DOWN`` edge is traversed from source to dest, an ``UP`` edge from
    dest to source.
    """

    edge: Edge[T]
    direction: Direction

    @classmethod
    def up(cls, edge: Edge[T]) -> "DirectedEdge[T]":
        return cls(edge, Direction.UP)

    @classmethod
    def down(cls, edge: Edge[T]) -> "DirectedEdge[T]":
        return cls(edge, Direction.DOWN)

    @property
    def label(self) -> str:
        return self.edge.label

    @property
    def start(self) -> T:
        """Vertex the edge is traversed from."""
        return self.edge.source if self.direction is Direction.DOWN else self.edge.dest

    @property
    def end(self) -> T:
        """Vertex reached by traversing the edge."""
        return self.edge.dest if self.direction is Direction.DOWN else self.edge.source

    def flip(self) -> "DirectedEdge[T]":
        return DirectedEdge(self.edge, self.direction.flip())

    def __str__(self) -> str:
        symbol = self.direction.symbol
        return f"{self.start} {symbol}{self.label}{symbol} {self.end}"


class Bipath(Generic[T]):
    """A walk through a graph as an ordered sequence of directed edges."""

    def __init__(self, edges: Iterable[DirectedEdge[T]] = ()):
        self._edges: Tuple[DirectedEdge[T], ...] = tuple(edges)

    @property
    def edges(self) -> Tuple[DirectedEdge[T], ...]:
        return self._edges

    @property
    def nodes(self) -> Tuple[T, ...]:
        """Vertices visited along the walk, start first."""
        if not self._edges:
            return ()
        return (self._edges[0].start,) + tuple(e.end for e in self._edges)

    @property
    def start(self) -> T:
        return self._edges[0].start

    @property
    def end(self) -> T:
        return self._edges[-1].end

    def reversed(self) -> "Bipath[T]":
        """The same walk traversed from the other end."""
        return Bipath(e.flip() for e in reversed(self._edges))

    def __iter__(self) -> Iterator[DirectedEdge[T]]:
        return iter(self._edges)

    def __len__(self) -> int:
        return len(self._edges)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bipath):
            return NotImplemented
        return self._edges == other._edges

    def __hash__(self) -> int:
        return hash(self._edges)

    def __repr__(self) -> str:
        return f"Bipath({list(self._edges)!r})"

    def __str__(self) -> str:
        return "; ".join(str(e) for e in self._edges)


class Graph(Generic[T]):
    """Immutable directed labeled multigraph.

    Parameters
    ----------
    vertices : Iterable[T]
        Vertices in enumeration order; duplicates are dropped
    edges : Iterable[Edge[T]]
        Labeled edges; every endpoint must be one of ``vertices``

    Raises
    ------
    GraphError
        If an edge references a vertex that is not in the graph
    """

    def __init__(self, vertices: Iterable[T], edges: Iterable[Edge[T]] = ()):
        self._vertices: Tuple[T, ...] = tuple(dict.fromkeys(vertices))
        self._edges: Tuple[Edge[T], ...] = tuple(dict.fromkeys(edges))

        incidence: Dict[T, List[DirectedEdge[T]]] = defaultdict(list)
        known = set(self._vertices)
        for edge in self._edges:
            for endpoint in (edge.source, edge.dest):
                if endpoint not in known:
                    raise GraphError(f"Edge {edge} references unknown vertex {endpoint!r}")
            incidence[edge.source].append(DirectedEdge.down(edge))
            incidence[edge.dest].append(DirectedEdge.up(edge))

        self._incidence: Dict[T, Tuple[DirectedEdge[T], ...]] = {
            v: tuple(incidence.get(v, ())) for v in self._vertices
        }

    @classmethod
    def from_edges(cls, edges: Iterable[Edge[T]]) -> "Graph[T]":
        """Build a graph whose vertices are the edge endpoints, in first-seen order."""
        edges = list(edges)
        vertices = [v for e in edges for v in (e.source, e.dest)]
        return cls(vertices, edges)

    @property
    def vertices(self) -> Tuple[T, ...]:
        return self._vertices

    @property
    def edges(self) -> Tuple[Edge[T], ...]:
        return self._edges

    def incident_edges(self, vertex: T) -> Tuple[DirectedEdge[T], ...]:
        """Directed views of every edge touching ``vertex``, traversed away from it.

        Edges are listed in the order they were added to the graph. A
        self-loop appears twice, once in each direction.
        """
        try:
            return self._incidence[vertex]
        except KeyError:
            raise GraphError(f"Vertex {vertex!r} is not in the graph") from None

    def __contains__(self, vertex: object) -> bool:
        return vertex in self._incidence

    def __len__(self) -> int:
        return len(self._vertices)

    def __iter__(self) -> Iterator[T]:
        return iter(self._vertices)

    def __repr__(self) -> str:
        return f"Graph(vertices={len(self._vertices)}, edges={len(self._edges)})"
