"""Compile textual patterns into ``Pattern`` objects.

Pattern text alternates node and edge elements::

    {arg1} <nsubj< {rel:lemma="give"} >dobj> {arg2}

Nodes are ``.*`` (any node), a node expression (see ``expressions``), or a
capture ``{alias}`` / ``{alias:expr}``. Several node tests joined with ``:``
must all hold. Edges are a label between delimiters: ``<label<`` climbs from
a dependent to its head, ``>label>`` descends from a head to a dependent and
``-label-`` goes either way. The label may be ``.*`` (any label), a regular
expression ``/regex/``, or a capture ``{alias}`` / ``{alias:label}``.

Whitespace between elements is ignored. ``str(pattern)`` renders a compiled
pattern back into text this module accepts.
"""

import re
from typing import Any, Callable, Iterable, List, Mapping, Optional, Set, Tuple

from ..config import CASE_INSENSITIVE_ATTRIBUTES, TRIVIAL_NODE_TEXT
from ..exceptions import InvalidPatternError, PatternSyntaxError
from ..graph import Direction
from .expressions import compile_expression
from .matchers import (
    UNDIRECTED_SYMBOL,
    CaptureEdgeMatcher,
    CaptureNodeMatcher,
    ConjunctiveNodeMatcher,
    DirectedEdgeMatcher,
    EdgeMatcher,
    LabelEdgeMatcher,
    Matcher,
    NodeMatcher,
    RegexEdgeMatcher,
    TrivialEdgeMatcher,
    TrivialNodeMatcher,
)
from .pattern import Pattern

ALIAS_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
LABEL_RE = re.compile(r"[^\s{}<>/\"']+")

WILDCARD = TRIVIAL_NODE_TEXT

EDGE_DIRECTIONS = {
    Direction.UP.symbol: Direction.UP,
    Direction.DOWN.symbol: Direction.DOWN,
    UNDIRECTED_SYMBOL: None,
}


def _find(text: str, start: int, targets: str, end: Optional[int] = None) -> int:
    """Index of the first target character at nesting depth zero, or -1.

    Quoted strings and ``/regex/`` literals are skipped; ``{}`` and ``()``
    nest.
    """
    end = len(text) if end is None else end
    depth = 0
    quote = None
    in_regex = False
    i = start
    while i < end:
        ch = text[i]
        if quote:
            if ch == quote:
                quote = None
        elif in_regex:
            if ch == "\\":
                i += 1
            elif ch == "/":
                in_regex = False
        elif depth == 0 and ch in targets:
            return i
        elif ch in "\"'":
            quote = ch
        elif ch == "/":
            in_regex = True
        elif ch in "{(":
            depth += 1
        elif ch in "})":
            depth -= 1
        i += 1
    return -1


class PatternCompiler:
    """Compiles pattern text over nodes with the given attributes.

    Parameters
    ----------
    attributes : Optional[Mapping[str, Callable]]
        Attribute accessors available to node expressions; defaults to the
        ``Token`` attributes ``string``, ``lemma``, ``pos`` and ``chunk``
    case_insensitive : Iterable[str]
        Attributes compared without regard to case
    """

    def __init__(
        self,
        attributes: Optional[Mapping[str, Callable[[Any], str]]] = None,
        case_insensitive: Iterable[str] = CASE_INSENSITIVE_ATTRIBUTES,
    ):
        self.attributes = attributes
        self.case_insensitive = tuple(case_insensitive)

    def compile(self, text: str) -> Pattern:
        """Compile ``text`` into a pattern.

        Raises
        ------
        PatternSyntaxError
            If the text is not a valid pattern
        """
        if not text or not text.strip():
            raise PatternSyntaxError("Empty pattern", text, 0)

        matchers: List[Matcher] = []
        aliases: Set[str] = set()

        pos = self._skip_space(text, 0)
        node, pos = self._node(text, pos, aliases)
        matchers.append(node)

        while True:
            pos = self._skip_space(text, pos)
            if pos >= len(text):
                break
            edge_start = pos
            edge, pos = self._edge(text, pos, aliases)
            matchers.append(edge)

            pos = self._skip_space(text, pos)
            if pos >= len(text):
                raise PatternSyntaxError(
                    "Pattern must end with a node", text[edge_start:], edge_start
                )
            node, pos = self._node(text, pos, aliases)
            matchers.append(node)

        return Pattern(matchers)

    @staticmethod
    def _skip_space(text: str, pos: int) -> int:
        while pos < len(text) and text[pos].isspace():
            pos += 1
        return pos

    def _alias(self, alias: str, position: int, aliases: Set[str]) -> str:
        alias = alias.strip()
        if not ALIAS_RE.fullmatch(alias):
            raise PatternSyntaxError("Invalid capture alias", alias, position)
        if alias in aliases:
            raise PatternSyntaxError("Duplicate capture alias", alias, position)
        aliases.add(alias)
        return alias

    def _closing_brace(self, text: str, pos: int, end: Optional[int] = None) -> int:
        close = _find(text, pos + 1, "}", end)
        if close < 0:
            raise PatternSyntaxError("Unbalanced '{'", text[pos:end], pos)
        return close

    # -- nodes ---------------------------------------------------------------

    def _node(self, text: str, pos: int, aliases: Set[str]) -> Tuple[NodeMatcher, int]:
        if text[pos] == "{":
            close = self._closing_brace(text, pos)
            inner = text[pos + 1:close]
            alias, sep, expression = inner.partition(":")
            alias = self._alias(alias, pos + 1, aliases)
            if not sep:
                return CaptureNodeMatcher(alias), close + 1
            expr_start = pos + 1 + len(inner) - len(expression)
            if not expression.strip():
                raise PatternSyntaxError("Empty node expression", inner, pos + 1)
            return CaptureNodeMatcher(alias, self._conjunction(expression, expr_start)), close + 1

        end = _find(text, pos, "<>" + UNDIRECTED_SYMBOL + "{}")
        if end < 0:
            end = len(text)
        if end == pos:
            raise PatternSyntaxError("Expected a node", text[pos], pos)
        return self._conjunction(text[pos:end], pos), end

    def _conjunction(self, text: str, offset: int) -> NodeMatcher:
        parts: List[NodeMatcher] = []
        start = 0
        while True:
            sep = _find(text, start, ":")
            chunk = text[start:] if sep < 0 else text[start:sep]
            parts.append(self._node_test(chunk, offset + start))
            if sep < 0:
                break
            start = sep + 1

        unique = list(dict.fromkeys(parts))
        if len(unique) == 1:
            return unique[0]
        try:
            return ConjunctiveNodeMatcher(unique)
        except InvalidPatternError as e:
            raise PatternSyntaxError(str(e), text, offset) from e

    def _node_test(self, text: str, offset: int) -> NodeMatcher:
        stripped = text.strip()
        position = offset + len(text) - len(text.lstrip())
        if not stripped:
            raise PatternSyntaxError("Empty node test", text, offset)
        if stripped == WILDCARD:
            return TrivialNodeMatcher()
        return compile_expression(
            stripped,
            attributes=self.attributes,
            case_insensitive=self.case_insensitive,
            offset=position,
        )

    # -- edges ---------------------------------------------------------------

    def _edge(self, text: str, pos: int, aliases: Set[str]) -> Tuple[EdgeMatcher, int]:
        symbol = text[pos]
        if symbol not in EDGE_DIRECTIONS:
            raise PatternSyntaxError(
                "Expected an edge starting with '<', '>' or '-'", text[pos:pos + 1], pos
            )
        close = _find(text, pos + 1, symbol)
        if close < 0:
            raise PatternSyntaxError(f"Unterminated edge, missing closing {symbol!r}", text[pos:], pos)

        body_start = self._skip_space(text, pos + 1)
        body = text[body_start:close].rstrip()
        if not body:
            raise PatternSyntaxError("Empty edge", text[pos:close + 1], pos)

        alias = None
        if body.startswith("{"):
            brace = self._closing_brace(text, body_start, close)
            if brace != body_start + len(body) - 1:
                raise PatternSyntaxError("Unexpected text after edge capture", body, body_start)
            inner = body[1:-1]
            alias_text, sep, label = inner.partition(":")
            alias = self._alias(alias_text, body_start + 1, aliases)
            label_start = body_start + 1 + len(inner) - len(label)
            matcher = self._label(label, label_start) if sep else TrivialEdgeMatcher()
        else:
            matcher = self._label(body, body_start)

        direction = EDGE_DIRECTIONS[symbol]
        if direction is not None:
            matcher = DirectedEdgeMatcher(direction, matcher)
        if alias is not None:
            matcher = CaptureEdgeMatcher(alias, matcher)
        return matcher, close + 1

    def _label(self, text: str, offset: int) -> EdgeMatcher:
        label = text.strip()
        if label == WILDCARD:
            return TrivialEdgeMatcher()
        if len(label) >= 2 and label.startswith("/") and label.endswith("/"):
            try:
                return RegexEdgeMatcher(label[1:-1])
            except re.error as e:
                raise PatternSyntaxError(f"Invalid regular expression: {e}", label, offset) from e
        if not LABEL_RE.fullmatch(label):
            raise PatternSyntaxError("Invalid edge label", label, offset)
        return LabelEdgeMatcher(label)


def compile_pattern(
    text: str,
    attributes: Optional[Mapping[str, Callable[[Any], str]]] = None,
) -> Pattern:
    """Compile pattern text using a default ``PatternCompiler``."""
    return PatternCompiler(attributes).compile(text)
