from dataclasses import dataclass
from enum import Enum
from typing_extensions import *


class RepetitionKind(Enum):
    ZERO_OR_ONE = "?"
    ZERO_OR_MORE = "*"
    ONE_OR_MORE = "+"
    RANGE = "{}"


class AnchorKind(Enum):
    START_LINE = "^"
    END_LINE = "$"
    START_TEXT = "\\A"
    END_TEXT = "\\z"


@dataclass(frozen=True)
class Empty:
    """Matches the empty string."""


@dataclass(frozen=True)
class Literal:
    """Matches exactly one character."""

    char: str


@dataclass(frozen=True)
class Concat:
    items: Tuple["Node", ...]


@dataclass(frozen=True)
class Alternation:
    branches: Tuple["Node", ...]


@dataclass(frozen=True)
class Repetition:
    """
    Postfix quantifier applied to a node.

    min/max only carry meaning for RepetitionKind.RANGE, max=None is
    unbounded. greedy is False for the lazy forms (a*?, a+?, ...).
    """

    kind: RepetitionKind
    node: "Node"
    min: int = 0
    max: Optional[int] = None
    greedy: bool = True


@dataclass(frozen=True)
class Group:
    node: "Node"
    name: Optional[str] = None
    capturing: bool = True


@dataclass(frozen=True)
class Class:
    """Character class, kept as its source spelling ("[a-z]", ".", "\\d")."""

    text: str


@dataclass(frozen=True)
class Anchor:
    kind: AnchorKind


@dataclass(frozen=True)
class WordBoundary:
    negated: bool = False


Node = Union[
    Empty,
    Literal,
    Concat,
    Alternation,
    Repetition,
    Group,
    Class,
    Anchor,
    WordBoundary,
]


def _quantifier_text(rep: Repetition) -> str:
    if rep.kind is not RepetitionKind.RANGE:
        text = rep.kind.value
    elif rep.max == rep.min:
        text = f"{{{rep.min}}}"
    elif rep.max is None:
        text = f"{{{rep.min},}}"
    else:
        text = f"{{{rep.min},{rep.max}}}"
    return text if rep.greedy else text + "?"


def describe(node: Node) -> str:
    """Short human readable name of a node, used in diagnostics."""
    if isinstance(node, Empty):
        return "empty expression"
    if isinstance(node, Literal):
        return f"literal {node.char!r}"
    if isinstance(node, Concat):
        return f"concatenation of {len(node.items)} items"
    if isinstance(node, Alternation):
        return f"alternation of {len(node.branches)} branches"
    if isinstance(node, Repetition):
        if node.kind is RepetitionKind.RANGE:
            return f"counted repetition '{_quantifier_text(node)}'"
        return f"repetition '{_quantifier_text(node)}'"
    if isinstance(node, Group):
        return "group" if node.name is None else f"group '{node.name}'"
    if isinstance(node, Class):
        return f"character class '{node.text}'"
    if isinstance(node, Anchor):
        return f"anchor '{node.kind.value}'"
    if isinstance(node, WordBoundary):
        return "word boundary '\\B'" if node.negated else "word boundary '\\b'"
    assert_never(node)
