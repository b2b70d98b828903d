"""Exceptions raised while turning a pattern into an automaton."""


class RegexError(Exception):
    """Base exception for all regex2nfa errors."""

    pass


class ParseError(RegexError):
    """Raised when a pattern cannot be parsed."""

    def __init__(self, message: str, position: int = -1) -> None:
        self.position = position
        super().__init__(message)

    def __str__(self) -> str:
        if self.position >= 0:
            return f"{super().__str__()} at position {self.position}"
        return super().__str__()


class UnsupportedError(RegexError):
    """Raised when the syntax tree contains a construct Thompson's
    construction does not handle here (classes, anchors, counted repetition)."""

    def __init__(self, feature: str) -> None:
        self.feature = feature
        super().__init__(f"{feature} not supported")
