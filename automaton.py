import logging
from collections import deque
from dataclasses import dataclass, field
from typing_extensions import *

import graphviz
from graphviz import Digraph

logger = logging.getLogger(__name__)

State = int


@dataclass(frozen=True)
class Transition:
    """
    Outgoing edge of a state.

    symbol is None for an epsilon move, otherwise the single character
    the move consumes.
    """

    target: State
    symbol: Optional[str] = None

    @property
    def is_epsilon(self) -> bool:
        return self.symbol is None


@dataclass
class Nfa:
    """
    Nondeterministic finite automaton stored as one transition list per state.

    States are the indices into `states`. They are only ever appended, and
    transitions are only ever appended to their state's list, so insertion
    order is stable. Start and accept states are tracked by the caller.
    """

    states: List[List[Transition]] = field(default_factory=list)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @property
    def num_states(self) -> int:
        return len(self.states)

    def new_state(self) -> State:
        state = len(self.states)
        self.states.append([])
        return state

    def _check_state(self, state: State) -> None:
        if not 0 <= state < len(self.states):
            raise ValueError(f"Unknown state: {state}")

    def add_transition(self, source: State, transition: Transition) -> None:
        self._check_state(source)
        self._check_state(transition.target)
        self.states[source].append(transition)

    def add_epsilon(self, source: State, target: State) -> None:
        self.add_transition(source, Transition(target))

    def add_symbol(self, source: State, symbol: str, target: State) -> None:
        if len(symbol) != 1:
            raise ValueError(f"Transition symbol must be one character: {symbol!r}")
        self.add_transition(source, Transition(target, symbol))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def transitions(self, state: State) -> List[Transition]:
        self._check_state(state)
        return list(self.states[state])

    def successors(self, state: State) -> List[State]:
        """Targets of the outgoing transitions of state, in stored order."""
        return [t.target for t in self.transitions(state)]

    def transition_count(self) -> int:
        return sum(len(transitions) for transitions in self.states)

    # -------------------------------------------------------------------------
    # Visualization
    # -------------------------------------------------------------------------

    def to_graphviz(
        self,
        start: State,
        accept: State,
        mapping: Optional[Dict[State, int]] = None,
        epsilon_label: str = " ",
        name: Optional[str] = None,
    ) -> Digraph:
        """
        Generate a Graphviz description of this automaton.

        Nodes keep their internal ids and are labelled with their canonical
        id from `mapping` (breadth-first numbering from start by default).
        States missing from the mapping are unreachable and left out.
        """
        if mapping is None:
            mapping = renumber_states(self, start)

        dot = Digraph(name=name, graph_attr={"rankdir": "LR"})
        dot.node("", shape="none")

        visible = [state for state in range(self.num_states) if state in mapping]
        for state in visible:
            dot.node(str(state), label=str(mapping[state]))

        dot.edge("", str(start))

        for state in visible:
            dot.node(
                str(state), shape="doublecircle" if state == accept else "circle"
            )
            for t in self.states[state]:
                if t.is_epsilon:
                    label = epsilon_label
                else:
                    label = graphviz.escape(t.symbol)
                dot.edge(str(state), str(t.target), label=label)

        return dot


def renumber_states(nfa: Nfa, start: State) -> Dict[State, int]:
    """
    Assign canonical ids by breadth-first traversal from start.

    Targets are visited in the order their transitions were recorded.
    States that cannot be reached from start are absent from the result.
    """
    if not 0 <= start < nfa.num_states:
        raise ValueError(f"Unknown start state: {start}")

    mapping: Dict[State, int] = {}
    queued = [False] * nfa.num_states
    queue: Deque[State] = deque([start])
    queued[start] = True

    while queue:
        state = queue.popleft()
        mapping[state] = len(mapping)
        for t in nfa.states[state]:
            if queued[t.target]:
                continue
            queued[t.target] = True
            queue.append(t.target)

    logger.debug(
        "renumbered %d of %d states from start %d",
        len(mapping),
        nfa.num_states,
        start,
    )
    return mapping


def render_file(
    dot: Digraph, filename: str, format: str = "png", view: bool = False
) -> str:
    """Render through the Graphviz `dot` executable and return the output path."""
    path = dot.render(filename, format=format, view=view, cleanup=True)
    logger.info("wrote %s", path)
    return path
