"""Attribute predicate sub-language for node matchers.

A node expression is a boolean combination of attribute tests::

    lemma="give"
    pos='NN' | pos='NNS'
    !(chunk="O") & string="Obama"

``!`` binds tighter than ``&``, which binds tighter than ``|``. Values must be
enclosed in single or double quotes. Which attributes exist, and how they are
read from a node, is configurable; the defaults read ``Token`` fields.
"""

from operator import attrgetter
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from ..config import CASE_INSENSITIVE_ATTRIBUTES
from ..exceptions import PatternSyntaxError
from .matchers import ExpressionNodeMatcher

Predicate = Callable[[Any], bool]

DEFAULT_ATTRIBUTES: Dict[str, Callable[[Any], str]] = {
    "string": attrgetter("string"),
    "lemma": attrgetter("lemma"),
    "pos": attrgetter("postag"),
    "chunk": attrgetter("chunk"),
}

# Binding strength, used to decide where rendering needs parentheses
_OR, _AND, _NOT, _ATOM = range(4)

_OPERATORS = "()&|!"


def _quote(value: str) -> str:
    return f"'{value}'" if '"' in value else f'"{value}"'


class _ExpressionParser:
    """Recursive-descent parser producing a predicate and canonical text."""

    def __init__(
        self,
        text: str,
        offset: int,
        attributes: Mapping[str, Callable[[Any], str]],
        case_insensitive: Iterable[str],
    ):
        self.text = text
        self.offset = offset
        self.attributes = attributes
        self.case_insensitive = set(case_insensitive)
        self.tokens = self._tokenize()
        self.index = 0

    def _error(self, message: str, token: Optional[str], position: int) -> PatternSyntaxError:
        return PatternSyntaxError(message, token, self.offset + position)

    def _tokenize(self) -> List[Tuple[str, Any, int]]:
        """Split the text into operator and attribute-test tokens."""
        tokens = []
        text = self.text
        i = 0
        while i < len(text):
            ch = text[i]
            if ch.isspace():
                i += 1
            elif ch in _OPERATORS:
                tokens.append(("op", ch, i))
                i += 1
            elif ch.isalpha() or ch == "_":
                start = i
                while i < len(text) and (text[i].isalnum() or text[i] == "_"):
                    i += 1
                name = text[start:i]
                while i < len(text) and text[i].isspace():
                    i += 1
                if i >= len(text) or text[i] != "=":
                    raise self._error("Expected '=' after attribute name", name, start)
                i += 1
                while i < len(text) and text[i].isspace():
                    i += 1
                if i >= len(text) or text[i] not in "\"'":
                    raise self._error(
                        "Value not enclosed in quote (\") or (')", text[start:i + 1], start
                    )
                quote = text[i]
                close = text.find(quote, i + 1)
                if close < 0:
                    raise self._error("Unterminated quoted value", text[i:], i)
                tokens.append(("test", (name, text[i + 1:close]), start))
                i = close + 1
            else:
                raise self._error("Unexpected character", ch, i)
        return tokens

    def _peek(self) -> Optional[Tuple[str, Any, int]]:
        return self.tokens[self.index] if self.index < len(self.tokens) else None

    def _peek_op(self, op: str) -> bool:
        token = self._peek()
        return token is not None and token[0] == "op" and token[1] == op

    def parse(self) -> Tuple[Predicate, str]:
        if not self.tokens:
            raise self._error("Empty expression", self.text, 0)
        predicate, text, _ = self._parse_or()
        token = self._peek()
        if token is not None:
            raise self._error("Unexpected token", str(token[1]), token[2])
        return predicate, text

    def _parse_or(self) -> Tuple[Predicate, str, int]:
        parts = [self._parse_and()]
        while self._peek_op("|"):
            self.index += 1
            parts.append(self._parse_and())
        if len(parts) == 1:
            return parts[0]
        predicates = [p for p, _, _ in parts]
        return (
            lambda node: any(p(node) for p in predicates),
            " | ".join(t for _, t, _ in parts),
            _OR,
        )

    def _parse_and(self) -> Tuple[Predicate, str, int]:
        parts = [self._parse_not()]
        while self._peek_op("&"):
            self.index += 1
            parts.append(self._parse_not())
        if len(parts) == 1:
            return parts[0]
        predicates = [p for p, _, _ in parts]
        texts = [t if prec > _OR else f"({t})" for _, t, prec in parts]
        return (
            lambda node: all(p(node) for p in predicates),
            " & ".join(texts),
            _AND,
        )

    def _parse_not(self) -> Tuple[Predicate, str, int]:
        token = self._peek()
        if token is None:
            raise self._error("Unexpected end of expression", self.text, len(self.text))

        kind, value, position = token
        if kind == "op" and value == "!":
            self.index += 1
            predicate, text, prec = self._parse_not()
            if prec < _NOT:
                text = f"({text})"
            return (lambda node: not predicate(node)), "!" + text, _NOT

        if kind == "op" and value == "(":
            self.index += 1
            inner = self._parse_or()
            if not self._peek_op(")"):
                raise self._error("Missing closing parenthesis", "(", position)
            self.index += 1
            return inner

        if kind == "test":
            self.index += 1
            return self._attribute_test(value[0], value[1], position)

        raise self._error("Unexpected token", value, position)

    def _attribute_test(self, name: str, value: str, position: int) -> Tuple[Predicate, str, int]:
        if name not in self.attributes:
            raise self._error(
                f"Unknown attribute; expected one of {sorted(self.attributes)}", name, position
            )
        accessor = self.attributes[name]
        text = f"{name}={_quote(value)}"

        if name in self.case_insensitive:
            expected = value.lower()
            return (lambda node: (accessor(node) or "").lower() == expected), text, _ATOM
        return (lambda node: accessor(node) == value), text, _ATOM


def compile_expression(
    text: str,
    attributes: Optional[Mapping[str, Callable[[Any], str]]] = None,
    case_insensitive: Iterable[str] = CASE_INSENSITIVE_ATTRIBUTES,
    offset: int = 0,
) -> ExpressionNodeMatcher:
    """Compile a node expression into a matcher.

    Parameters
    ----------
    text : str
        Expression source, e.g. ``lemma="give" & pos="VBD"``
    attributes : Optional[Mapping[str, Callable]]
        Attribute name to accessor; defaults to ``DEFAULT_ATTRIBUTES``
    case_insensitive : Iterable[str]
        Attributes compared without regard to case
    offset : int
        Position of ``text`` within a larger pattern, for error reporting

    Returns
    -------
    ExpressionNodeMatcher
        Matcher whose expression is the canonical rendering of ``text``

    Raises
    ------
    PatternSyntaxError
        On unknown attributes, unquoted values or malformed expressions
    """
    parser = _ExpressionParser(
        text,
        offset,
        attributes if attributes is not None else DEFAULT_ATTRIBUTES,
        case_insensitive,
    )
    predicate, canonical = parser.parse()
    return ExpressionNodeMatcher(canonical, predicate)
