"""Results of a successful pattern search."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Generic, Hashable, Mapping, Optional, Tuple, TypeVar

from ..graph import Bipath, DirectedEdge

if TYPE_CHECKING:
    from .pattern import Pattern

T = TypeVar("T", bound=Hashable)


@dataclass(frozen=True)
class NodeGroup(Generic[T]):
    """A captured node and the text its matcher reported."""

    node: T
    text: str


@dataclass(frozen=True)
class EdgeGroup(Generic[T]):
    """A captured directed edge and the text its matcher reported."""

    dedge: DirectedEdge[T]
    text: str


class Match(Generic[T]):
    """One match of a pattern in a graph.

    Parameters
    ----------
    pattern : Pattern
        The pattern that produced this match
    bipath : Bipath
        Directed edges traversed, in traversal order
    node_groups : Mapping[str, NodeGroup]
        Captured nodes by alias
    edge_groups : Mapping[str, EdgeGroup]
        Captured edges by alias
    """

    def __init__(
        self,
        pattern: "Pattern[T]",
        bipath: Bipath[T],
        node_groups: Mapping[str, NodeGroup[T]],
        edge_groups: Mapping[str, EdgeGroup[T]],
    ):
        self._pattern = pattern
        self._bipath = bipath
        self._node_groups = MappingProxyType(dict(node_groups))
        self._edge_groups = MappingProxyType(dict(edge_groups))

    @property
    def pattern(self) -> "Pattern[T]":
        return self._pattern

    @property
    def bipath(self) -> Bipath[T]:
        return self._bipath

    @property
    def edges(self) -> Tuple[DirectedEdge[T], ...]:
        return self._bipath.edges

    @property
    def node_groups(self) -> Mapping[str, NodeGroup[T]]:
        return self._node_groups

    @property
    def edge_groups(self) -> Mapping[str, EdgeGroup[T]]:
        return self._edge_groups

    def node(self, alias: str) -> Optional[T]:
        """The node captured under ``alias``, if any."""
        group = self._node_groups.get(alias)
        return group.node if group is not None else None

    def edge(self, alias: str) -> Optional[DirectedEdge[T]]:
        """The directed edge captured under ``alias``, if any."""
        group = self._edge_groups.get(alias)
        return group.dedge if group is not None else None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Match):
            return NotImplemented
        return (
            self._pattern == other._pattern
            and self._bipath == other._bipath
            and self._node_groups == other._node_groups
            and self._edge_groups == other._edge_groups
        )

    def __hash__(self) -> int:
        return hash((
            self._pattern,
            self._bipath,
            frozenset(self._node_groups.items()),
            frozenset(self._edge_groups.items()),
        ))

    def __repr__(self) -> str:
        return f"Match(pattern={str(self._pattern)!r}, bipath={self._bipath!r})"

    def __str__(self) -> str:
        captures = [f"{alias}={group.node}" for alias, group in self._node_groups.items()]
        captures += [f"{alias}={group.dedge.label}" for alias, group in self._edge_groups.items()]
        return f"{self._bipath} [{', '.join(captures)}]"
