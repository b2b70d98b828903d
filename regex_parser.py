import logging
import re
from typing_extensions import *

from errors import ParseError
from regex_tree import (
    Alternation,
    Anchor,
    AnchorKind,
    Class,
    Concat,
    Empty,
    Group,
    Literal,
    Node,
    Repetition,
    RepetitionKind,
    WordBoundary,
)

logger = logging.getLogger(__name__)

QUANTIFIERS = {
    "?": RepetitionKind.ZERO_OR_ONE,
    "*": RepetitionKind.ZERO_OR_MORE,
    "+": RepetitionKind.ONE_OR_MORE,
}

CLASS_ESCAPES = "dDwWsS"
CONTROL_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "f": "\f",
    "v": "\v",
    "a": "\x07",
}
ANCHOR_ESCAPES = {
    "A": AnchorKind.START_TEXT,
    "z": AnchorKind.END_TEXT,
}

GROUP_NAME = re.compile(r"[A-Za-z_]\w*")
COUNTED = re.compile(r"\{(\d+)(,(\d*))?\}")
HEX_DIGITS = re.compile(r"[0-9A-Fa-f]+")


class RegexParser:
    """
    Recursive descent parser producing a regex_tree.

    Grammar, lowest precedence first:
        alternation := concat ('|' concat)*
        concat      := repeat*
        repeat      := atom (quantifier '?'?)?
        atom        := '(' alternation ')' | '[' ... ']' | '.' | '^' | '$'
                     | '\\' escape | char
    """

    def __init__(self, pattern: str):
        self.pattern = pattern
        self.pos = 0

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def _peek(self) -> Optional[str]:
        if self.pos < len(self.pattern):
            return self.pattern[self.pos]
        return None

    def _next(self) -> str:
        char = self._peek()
        if char is None:
            raise ParseError("unexpected end of pattern", self.pos)
        self.pos += 1
        return char

    def _at_end(self) -> bool:
        return self.pos >= len(self.pattern)

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def parse(self) -> Node:
        node = self._parse_alternation()
        if not self._at_end():
            # Only a stray ')' can stop the alternation early
            raise ParseError("unopened group", self.pos)
        return node

    def _parse_alternation(self) -> Node:
        branches = [self._parse_concat()]
        while self._peek() == "|":
            self.pos += 1
            branches.append(self._parse_concat())
        if len(branches) == 1:
            return branches[0]
        return Alternation(tuple(branches))

    def _parse_concat(self) -> Node:
        items: List[Node] = []
        while not self._at_end() and self._peek() not in "|)":
            items.append(self._parse_repeat())
        if not items:
            return Empty()
        if len(items) == 1:
            return items[0]
        return Concat(tuple(items))

    def _parse_repeat(self) -> Node:
        node = self._parse_atom()
        char = self._peek()

        if char in QUANTIFIERS:
            self.pos += 1
            node = Repetition(QUANTIFIERS[char], node)
        elif char == "{":
            node = self._parse_counted(node)
        else:
            return node

        if self._peek() == "?":
            self.pos += 1
            node = Repetition(node.kind, node.node, node.min, node.max, greedy=False)

        if not self._at_end() and self._peek() in "?*+{":
            raise ParseError("repetition operator applied to a repetition", self.pos)
        return node

    def _parse_counted(self, node: Node) -> Repetition:
        match = COUNTED.match(self.pattern, self.pos)
        if match is None:
            raise ParseError("invalid counted repetition", self.pos)

        start = self.pos
        self.pos = match.end()
        low = int(match.group(1))
        if match.group(2) is None:
            high: Optional[int] = low
        elif match.group(3):
            high = int(match.group(3))
        else:
            high = None

        if high is not None and high < low:
            raise ParseError(
                f"invalid counted repetition {{{low},{high}}}: max is less than min",
                start,
            )
        return Repetition(RepetitionKind.RANGE, node, low, high)

    def _parse_atom(self) -> Node:
        start = self.pos
        char = self._next()

        if char == "(":
            return self._parse_group(start)
        if char == "[":
            return self._parse_class(start)
        if char == ".":
            return Class(".")
        if char == "^":
            return Anchor(AnchorKind.START_LINE)
        if char == "$":
            return Anchor(AnchorKind.END_LINE)
        if char == "\\":
            return self._parse_escape(start)
        if char in QUANTIFIERS or char == "{":
            raise ParseError("repetition operator missing expression", start)
        return Literal(char)

    def _parse_group(self, start: int) -> Group:
        name = None
        capturing = True

        if self._peek() == "?":
            self.pos += 1
            rest = self.pattern[self.pos :]
            if rest.startswith(":"):
                self.pos += 1
                capturing = False
            elif rest.startswith("P<") or (
                rest.startswith("<") and not rest.startswith(("<=", "<!"))
            ):
                self.pos = self.pattern.index("<", self.pos) + 1
                name = self._parse_group_name()
            else:
                raise ParseError("unsupported group syntax '(?'", start)

        node = self._parse_alternation()
        if self._peek() != ")":
            raise ParseError("unclosed group", start)
        self.pos += 1
        return Group(node, name=name, capturing=capturing)

    def _parse_group_name(self) -> str:
        match = GROUP_NAME.match(self.pattern, self.pos)
        end = self.pattern.find(">", self.pos)
        if match is None or match.end() != end:
            raise ParseError("invalid capture group name", self.pos)
        self.pos = end + 1
        return match.group()

    def _parse_class(self, start: int) -> Class:
        i = self.pos
        text = self.pattern

        if text.startswith("^", i):
            i += 1
        if text.startswith("]", i):
            i += 1

        depth = 1
        while i < len(text):
            char = text[i]
            if char == "\\":
                i += 2
                continue
            if char == "[":
                if text.startswith("[:", i):
                    close = text.find(":]", i + 2)
                    if close != -1:
                        i = close + 2
                        continue
                depth += 1
            elif char == "]":
                depth -= 1
                if depth == 0:
                    self.pos = i + 1
                    return Class(text[start : self.pos])
            i += 1

        raise ParseError("unclosed character class", start)

    def _parse_escape(self, start: int) -> Node:
        if self._at_end():
            raise ParseError("incomplete escape sequence", start)
        char = self._next()

        if char in CLASS_ESCAPES:
            return Class("\\" + char)
        if char in "pP":
            return self._parse_unicode_class(start)
        if char == "b":
            return WordBoundary(negated=False)
        if char == "B":
            return WordBoundary(negated=True)
        if char in ANCHOR_ESCAPES:
            return Anchor(ANCHOR_ESCAPES[char])
        if char in CONTROL_ESCAPES:
            return Literal(CONTROL_ESCAPES[char])
        if char == "x":
            return Literal(self._parse_hex(start, 2))
        if char == "u":
            return Literal(self._parse_hex(start, 4))
        if char == "U":
            return Literal(self._parse_hex(start, 8))
        if not char.isalnum():
            return Literal(char)
        raise ParseError(f"unrecognized escape sequence '\\{char}'", start)

    def _parse_unicode_class(self, start: int) -> Class:
        if self._peek() == "{":
            close = self.pattern.find("}", self.pos)
            if close == -1:
                raise ParseError("unclosed unicode class", start)
            self.pos = close + 1
        else:
            self._next()
        return Class(self.pattern[start : self.pos])

    def _parse_hex(self, start: int, width: int) -> str:
        if self._peek() == "{":
            close = self.pattern.find("}", self.pos)
            digits = self.pattern[self.pos + 1 : close] if close != -1 else ""
            end = close + 1
        else:
            digits = self.pattern[self.pos : self.pos + width]
            end = self.pos + width
            if len(digits) != width:
                digits = ""

        if not digits or not HEX_DIGITS.fullmatch(digits):
            raise ParseError("invalid hexadecimal escape", start)

        codepoint = int(digits, 16)
        if codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
            raise ParseError(f"invalid unicode codepoint {codepoint:#x}", start)
        self.pos = end
        return chr(codepoint)


def parse(pattern: str) -> Node:
    """Parse a pattern string into its syntax tree."""
    node = RegexParser(pattern).parse()
    logger.debug("parsed %r into %s", pattern, type(node).__name__)
    return node
