"""
TLA+ value to JSON conversion.

Converts the values TLC and Apalache print in states into JSON-compatible
Python objects:

    integers            -> int
    "strings"           -> str
    TRUE / FALSE        -> bool
    model values        -> str
    <<a, b>> / {a, b}   -> list
    a..b                -> list of the integers in the interval
    [k |-> v]           -> dict
    (k :> v @@ ...)     -> dict when every key is a string, else
                           {"#map": [[k, v], ...]}
"""

import logging
import re
from typing import Any, Dict, List, Tuple

from ..artifacts import TlaState, split_state
from ...errors import TlaValueError

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(r"""
    (?P<ws>\s+)
  | (?P<string>"(?:[^"\\]|\\.)*")
  | (?P<number>-?\d+)
  | (?P<symbol><<|>>|\|->|:>|@@|\.\.|[{}\[\](),])
  | (?P<ident>[A-Za-z_][A-Za-z0-9_]*)
""", re.VERBOSE)

STRING_ESCAPES = {'n': '\n', 't': '\t', 'r': '\r', 'f': '\f', '"': '"', '\\': '\\'}
FUNCTION_MAP_KEY = "#map"

Token = Tuple[str, str]


def tokenize(text: str) -> List[Token]:
    tokens = []
    pos = 0
    while pos < len(text):
        match = TOKEN_RE.match(text, pos)
        if not match:
            raise TlaValueError(f"unexpected character {text[pos]!r} at {pos}", text)
        kind = match.lastgroup
        if kind != "ws":
            tokens.append((kind, match.group(kind)))
        pos = match.end()
    return tokens


def _unescape(literal: str) -> str:
    body = literal[1:-1]
    return re.sub(r"\\(.)", lambda m: STRING_ESCAPES.get(m.group(1), m.group(1)), body)


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.tokens = tokenize(text)
        self.pos = 0

    def peek(self) -> Token:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return ("eof", "")

    def next(self) -> Token:
        token = self.peek()
        if token[0] == "eof":
            raise TlaValueError("unexpected end of value", self.text)
        self.pos += 1
        return token

    def expect(self, symbol: str) -> None:
        kind, value = self.next()
        if kind != "symbol" or value != symbol:
            raise TlaValueError(f"expected {symbol!r}, found {value!r}", self.text)

    def at(self, symbol: str) -> bool:
        kind, value = self.peek()
        return kind == "symbol" and value == symbol

    def parse(self) -> Any:
        value = self.expression()
        if self.peek()[0] != "eof":
            raise TlaValueError(f"trailing input {self.peek()[1]!r}", self.text)
        return value

    def expression(self) -> Any:
        first = self.primary()
        if self.at(".."):
            self.next()
            return _interval(first, self.primary(), self.text)
        if not self.at(":>"):
            return first
        pairs = []
        key = first
        while True:
            self.expect(":>")
            pairs.append((key, self.primary()))
            if not self.at("@@"):
                break
            self.next()
            key = self.primary()
        return _function(pairs)

    def _items(self, close: str) -> List[Any]:
        items = []
        if self.at(close):
            self.next()
            return items
        while True:
            items.append(self.expression())
            if self.at(","):
                self.next()
                continue
            self.expect(close)
            return items

    def _record(self) -> Dict[str, Any]:
        record = {}
        while True:
            kind, name = self.next()
            if kind != "ident":
                raise TlaValueError(f"expected record field, found {name!r}", self.text)
            self.expect("|->")
            record[name] = self.expression()
            if self.at(","):
                self.next()
                continue
            self.expect("]")
            return record

    def primary(self) -> Any:
        kind, value = self.next()
        if kind == "number":
            return int(value)
        if kind == "string":
            return _unescape(value)
        if kind == "ident":
            if value == "TRUE":
                return True
            if value == "FALSE":
                return False
            return value
        if value == "<<":
            return self._items(">>")
        if value == "{":
            return self._items("}")
        if value == "[":
            return self._record()
        if value == "(":
            inner = self.expression()
            self.expect(")")
            return inner
        raise TlaValueError(f"unexpected token {value!r}", self.text)


def _interval(low: Any, high: Any, text: str) -> List[int]:
    if type(low) is not int or type(high) is not int:
        raise TlaValueError(f"interval bounds must be integers: {low!r}..{high!r}", text)
    return list(range(low, high + 1))


def _function(pairs: List[Tuple[Any, Any]]) -> Any:
    if all(isinstance(key, str) for key, _ in pairs):
        return {key: value for key, value in pairs}
    return {FUNCTION_MAP_KEY: [[key, value] for key, value in pairs]}


def tla_value_to_json(text: str) -> Any:
    """
    Convert one printed TLA+ value.

    Args:
        text: Value text, e.g. `[a |-> <<1, 2>>, b |-> "x"]`

    Returns:
        JSON-compatible Python object
    """
    return _Parser(text).parse()


def state_to_json(state: TlaState) -> Dict[str, Any]:
    """Convert a printed state to a JSON object keyed by variable."""
    return {var: tla_value_to_json(value) for var, value in split_state(state).items()}


def try_state_to_json(state: TlaState) -> Dict[str, Any]:
    """Convert a printed state, or return an empty object if it can't be parsed."""
    try:
        return state_to_json(state)
    except TlaValueError as e:
        logger.warning(f"No JSON form for state: {e}")
        return {}
