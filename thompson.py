import logging
from dataclasses import dataclass
from typing_extensions import *

from graphviz import Digraph

from automaton import Nfa, State, renumber_states
from errors import UnsupportedError
from regex_parser import parse
from regex_tree import (
    Alternation,
    Anchor,
    Class,
    Concat,
    Empty,
    Group,
    Literal,
    Node,
    Repetition,
    RepetitionKind,
    WordBoundary,
    describe,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThompsonNfa:
    """A compiled automaton together with its entry and exit states."""

    nfa: Nfa
    start: State
    accept: State

    def renumber(self) -> Dict[State, int]:
        return renumber_states(self.nfa, self.start)

    def to_graphviz(self, epsilon_label: str = " ", name: Optional[str] = None) -> Digraph:
        return self.nfa.to_graphviz(
            self.start,
            self.accept,
            mapping=self.renumber(),
            epsilon_label=epsilon_label,
            name=name,
        )


def build(nfa: Nfa, node: Node, start: State, accept: State, owned: bool = True) -> None:
    """
    Thompson's construction: extend nfa so that the fragment entered at start
    and left at accept recognizes exactly the language of node.

    owned tells whether this fragment is the only one attaching transitions
    to start and accept. Loops are put directly on those states only when it
    is; otherwise a repetition gets private states joined by epsilon moves.
    """
    if isinstance(node, Empty):
        nfa.add_epsilon(start, accept)

    elif isinstance(node, Literal):
        nfa.add_symbol(start, node.char, accept)

    elif isinstance(node, Group):
        build(nfa, node.node, start, accept, owned)

    elif isinstance(node, Concat):
        if not node.items:
            nfa.add_epsilon(start, accept)
            return
        child_owned = owned and len(node.items) == 1
        for i, item in enumerate(node.items):
            nxt = accept if i == len(node.items) - 1 else nfa.new_state()
            build(nfa, item, start, nxt, child_owned)
            start = nxt

    elif isinstance(node, Alternation):
        child_owned = owned and len(node.branches) == 1
        for branch in node.branches:
            build(nfa, branch, start, accept, child_owned)

    elif isinstance(node, Repetition):
        _build_repetition(nfa, node, start, accept, owned)

    elif isinstance(node, (Class, Anchor, WordBoundary)):
        raise UnsupportedError(describe(node))

    else:
        assert_never(node)


def _build_repetition(
    nfa: Nfa, rep: Repetition, start: State, accept: State, owned: bool
) -> None:
    if rep.kind is RepetitionKind.ZERO_OR_ONE:
        build(nfa, rep.node, start, accept, owned=False)
        nfa.add_epsilon(start, accept)

    elif rep.kind is RepetitionKind.ZERO_OR_MORE:
        if owned:
            build(nfa, rep.node, start, start, owned=False)
            nfa.add_epsilon(start, accept)
        else:
            loop = nfa.new_state()
            nfa.add_epsilon(start, loop)
            build(nfa, rep.node, loop, loop, owned=False)
            nfa.add_epsilon(loop, accept)

    elif rep.kind is RepetitionKind.ONE_OR_MORE:
        if owned:
            build(nfa, rep.node, start, accept, owned=False)
            nfa.add_epsilon(accept, start)
        else:
            entry = nfa.new_state()
            tail = nfa.new_state()
            nfa.add_epsilon(start, entry)
            build(nfa, rep.node, entry, tail, owned=False)
            nfa.add_epsilon(tail, entry)
            nfa.add_epsilon(tail, accept)

    elif rep.kind is RepetitionKind.RANGE:
        raise UnsupportedError(describe(rep))

    else:
        assert_never(rep.kind)

    logger.debug(
        "built %s between %d and %d (%s)",
        rep.kind.name,
        start,
        accept,
        "owned" if owned else "shared",
    )


def compile_tree(node: Node) -> ThompsonNfa:
    """Compile a syntax tree on a fresh automaton with start 0 and accept 1."""
    nfa = Nfa()
    start = nfa.new_state()
    accept = nfa.new_state()
    build(nfa, node, start, accept)
    logger.debug(
        "compiled %s into %d states and %d transitions",
        describe(node),
        nfa.num_states,
        nfa.transition_count(),
    )
    return ThompsonNfa(nfa, start, accept)


class RegularExpression:
    """
    Regular expression that converts to an NFA with Thompson's construction.

    Supports literals, grouping, alternation `|`, concatenation and the
    quantifiers `?`, `*`, `+`. Character classes, anchors, word boundaries
    and counted repetition parse but are rejected when compiling.
    """

    def __init__(self, pattern: str = ""):
        self.pattern = pattern

    def __str__(self):
        return f"RegEx: {self.pattern}"

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    def tree(self) -> Node:
        return parse(self.pattern)

    def to_nfa(self) -> ThompsonNfa:
        return compile_tree(self.tree())

    def to_graphviz(self, epsilon_label: str = " ", name: Optional[str] = None) -> Digraph:
        return self.to_nfa().to_graphviz(epsilon_label=epsilon_label, name=name)

    # Constructors ----------------------------------------------------------

    @classmethod
    def from_string(cls, pattern: str) -> "RegularExpression":
        """Create a RegularExpression from a string pattern."""
        return cls(pattern)

    @classmethod
    def from_file(cls, filename: str) -> "RegularExpression":
        """Load a regular expression from a file."""
        with open(filename, "r", encoding="utf-8") as f:
            content = f.read().strip()
        return cls(content)
