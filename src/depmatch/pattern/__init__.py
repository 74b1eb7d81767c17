"""Pattern language over dependency graphs.

The pieces, leaves first:

1. ``matchers``: node and edge tests and the wrappers that capture matches
   or constrain edge direction
2. ``pattern``: alternating matcher sequences and the backtracking search
3. ``match``: what a successful search returns
4. ``expressions`` / ``compiler``: turning pattern text into a ``Pattern``
"""

from .compiler import PatternCompiler, compile_pattern
from .expressions import DEFAULT_ATTRIBUTES, compile_expression
from .match import EdgeGroup, Match, NodeGroup
from .matchers import (
    BaseEdgeMatcher,
    BaseNodeMatcher,
    CaptureEdgeMatcher,
    CaptureNodeMatcher,
    ConjunctiveNodeMatcher,
    DirectedEdgeMatcher,
    EdgeMatcher,
    ExpressionNodeMatcher,
    LabelEdgeMatcher,
    Matcher,
    NodeMatcher,
    RegexEdgeMatcher,
    TrivialEdgeMatcher,
    TrivialNodeMatcher,
    WrappedEdgeMatcher,
    WrappedNodeMatcher,
)
from .pattern import Pattern

__all__ = [
    # Pattern & search
    "Pattern",
    "Match",
    "NodeGroup",
    "EdgeGroup",
    # Compilation
    "PatternCompiler",
    "compile_pattern",
    "compile_expression",
    "DEFAULT_ATTRIBUTES",
    # Matchers
    "Matcher",
    "NodeMatcher",
    "BaseNodeMatcher",
    "WrappedNodeMatcher",
    "TrivialNodeMatcher",
    "ExpressionNodeMatcher",
    "CaptureNodeMatcher",
    "ConjunctiveNodeMatcher",
    "EdgeMatcher",
    "BaseEdgeMatcher",
    "WrappedEdgeMatcher",
    "TrivialEdgeMatcher",
    "LabelEdgeMatcher",
    "RegexEdgeMatcher",
    "DirectedEdgeMatcher",
    "CaptureEdgeMatcher",
]
