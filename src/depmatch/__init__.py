"""Pattern matching over dependency graphs.

This package searches directed, edge-labeled graphs (dependency parses of
sentences) for structural motifs written in a compact pattern language,
returning every match with the nodes and edges it captured.

The pipeline:
1. Parse text with spaCy, or read CoNLL-U, into ``Graph[Token]``s
2. Compile pattern text such as ``{arg1} <nsubj< {rel} >dobj> {arg2}``
3. Search graphs with ``Pattern.search`` or a ``RuleMatcher`` catalogue
"""

__version__ = "1.0.0"

from .exceptions import DepmatchError, GraphError, InvalidPatternError, PatternSyntaxError
from .graph import Bipath, DirectedEdge, Direction, Edge, Graph
from .pattern import (
    CaptureEdgeMatcher,
    CaptureNodeMatcher,
    ConjunctiveNodeMatcher,
    DirectedEdgeMatcher,
    EdgeGroup,
    ExpressionNodeMatcher,
    LabelEdgeMatcher,
    Match,
    NodeGroup,
    Pattern,
    PatternCompiler,
    RegexEdgeMatcher,
    TrivialEdgeMatcher,
    TrivialNodeMatcher,
    compile_pattern,
)
from .rule_matcher import RuleMatch, RuleMatcher
from .tokens import Token

compile = compile_pattern

__all__ = [
    # Graphs
    "Graph",
    "Edge",
    "DirectedEdge",
    "Direction",
    "Bipath",
    "Token",
    # Patterns
    "Pattern",
    "Match",
    "NodeGroup",
    "EdgeGroup",
    "PatternCompiler",
    "compile",
    "compile_pattern",
    "TrivialNodeMatcher",
    "ExpressionNodeMatcher",
    "CaptureNodeMatcher",
    "ConjunctiveNodeMatcher",
    "TrivialEdgeMatcher",
    "LabelEdgeMatcher",
    "RegexEdgeMatcher",
    "DirectedEdgeMatcher",
    "CaptureEdgeMatcher",
    # Catalogue
    "RuleMatcher",
    "RuleMatch",
    # Errors
    "DepmatchError",
    "InvalidPatternError",
    "PatternSyntaxError",
    "GraphError",
]
