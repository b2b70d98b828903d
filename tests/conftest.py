import pytest

from thompson import ThompsonNfa


def epsilon_closure(nfa, states):
    closure = set(states)
    stack = list(states)
    while stack:
        state = stack.pop()
        for t in nfa.states[state]:
            if t.is_epsilon and t.target not in closure:
                closure.add(t.target)
                stack.append(t.target)
    return closure


def nfa_accepts(compiled: ThompsonNfa, word: str) -> bool:
    """Simulate the automaton on word, used to check the language it recognizes."""
    current = epsilon_closure(compiled.nfa, {compiled.start})
    for char in word:
        moved = {
            t.target
            for state in current
            for t in compiled.nfa.states[state]
            if t.symbol == char
        }
        current = epsilon_closure(compiled.nfa, moved)
    return compiled.accept in current


@pytest.fixture
def accepts():
    return nfa_accepts
