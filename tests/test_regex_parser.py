import pytest

from errors import ParseError
from regex_parser import parse
from regex_tree import (
    Alternation,
    Anchor,
    AnchorKind,
    Class,
    Concat,
    Empty,
    Group,
    Literal,
    Repetition,
    RepetitionKind,
    WordBoundary,
    describe,
)

a, b, c = Literal("a"), Literal("b"), Literal("c")


class TestStructure:
    def test_empty_pattern(self):
        assert parse("") == Empty()

    def test_single_literal(self):
        assert parse("a") == a

    def test_concatenation_is_flat(self):
        assert parse("abc") == Concat((a, b, c))

    def test_alternation_is_flat(self):
        assert parse("a|b|c") == Alternation((a, b, c))

    def test_alternation_binds_weaker_than_concatenation(self):
        assert parse("ab|c") == Alternation((Concat((a, b)), c))

    def test_empty_branch(self):
        assert parse("a|") == Alternation((a, Empty()))
        assert parse("|a") == Alternation((Empty(), a))

    def test_empty_group(self):
        assert parse("()") == Group(Empty())

    def test_nested_groups(self):
        assert parse("((a))") == Group(Group(a))

    def test_non_capturing_group(self):
        assert parse("(?:ab)") == Group(Concat((a, b)), capturing=False)

    @pytest.mark.parametrize("pattern", ["(?P<word>a)", "(?<word>a)"])
    def test_named_group(self, pattern):
        assert parse(pattern) == Group(a, name="word")

    def test_repeated_alternation_example(self):
        tree = parse("a(bc|bd)*(e|f)")
        assert tree == Concat(
            (
                a,
                Repetition(
                    RepetitionKind.ZERO_OR_MORE,
                    Group(
                        Alternation(
                            (Concat((b, c)), Concat((b, Literal("d"))))
                        )
                    ),
                ),
                Group(Alternation((Literal("e"), Literal("f")))),
            )
        )


class TestQuantifiers:
    @pytest.mark.parametrize(
        "pattern,kind",
        [
            ("a?", RepetitionKind.ZERO_OR_ONE),
            ("a*", RepetitionKind.ZERO_OR_MORE),
            ("a+", RepetitionKind.ONE_OR_MORE),
        ],
    )
    def test_simple(self, pattern, kind):
        assert parse(pattern) == Repetition(kind, a)

    def test_binds_to_last_atom(self):
        assert parse("ab*") == Concat((a, Repetition(RepetitionKind.ZERO_OR_MORE, b)))

    def test_lazy(self):
        assert parse("a+?") == Repetition(RepetitionKind.ONE_OR_MORE, a, greedy=False)
        assert parse("a??") == Repetition(RepetitionKind.ZERO_OR_ONE, a, greedy=False)

    @pytest.mark.parametrize(
        "pattern,low,high",
        [("a{3}", 3, 3), ("a{2,}", 2, None), ("a{2,5}", 2, 5), ("a{0,1}", 0, 1)],
    )
    def test_counted(self, pattern, low, high):
        assert parse(pattern) == Repetition(RepetitionKind.RANGE, a, low, high)

    def test_counted_lazy(self):
        assert parse("a{1,2}?") == Repetition(
            RepetitionKind.RANGE, a, 1, 2, greedy=False
        )


class TestUnsupportedSyntax:
    """These parse fine, the compiler is the one rejecting them."""

    @pytest.mark.parametrize(
        "pattern", ["[a-z]", "[^abc]", "[]a]", "[^]]", "[[:alpha:]_]", "[a[bc]]", r"[\]]"]
    )
    def test_bracket_class(self, pattern):
        assert parse(pattern) == Class(pattern)

    @pytest.mark.parametrize("pattern", [".", r"\d", r"\W", r"\s", r"\pL", r"\p{Greek}", r"\PN"])
    def test_class_shorthands(self, pattern):
        assert parse(pattern) == Class(pattern)

    def test_class_inside_concatenation(self):
        assert parse("x[ab]y") == Concat((Literal("x"), Class("[ab]"), Literal("y")))

    def test_anchors(self):
        assert parse("^a$") == Concat(
            (Anchor(AnchorKind.START_LINE), a, Anchor(AnchorKind.END_LINE))
        )
        assert parse(r"\Aa\z") == Concat(
            (Anchor(AnchorKind.START_TEXT), a, Anchor(AnchorKind.END_TEXT))
        )

    def test_word_boundary(self):
        assert parse(r"\b") == WordBoundary()
        assert parse(r"\B") == WordBoundary(negated=True)


class TestEscapes:
    @pytest.mark.parametrize(
        "pattern,char",
        [
            (r"\n", "\n"),
            (r"\t", "\t"),
            (r"\.", "."),
            (r"\*", "*"),
            (r"\\", "\\"),
            (r"\(", "("),
            (r"\{", "{"),
            (r"\x41", "A"),
            (r"\x{263A}", "☺"),
            (r"é", "é"),
            (r"\u{1F600}", "\U0001F600"),
        ],
    )
    def test_literal(self, pattern, char):
        assert parse(pattern) == Literal(char)

    def test_closing_brace_is_literal(self):
        assert parse("}") == Literal("}")


class TestErrors:
    @pytest.mark.parametrize(
        "pattern,position",
        [
            ("(ab", 0),
            ("a(b(c)", 1),
            ("ab)", 2),
            (")", 0),
            ("*a", 0),
            ("a|+", 2),
            ("a**", 2),
            ("a+*", 2),
            ("a{2}{3}", 4),
            ("{2}", 0),
            ("a{", 1),
            ("a{x}", 1),
            ("a{3,1}", 1),
            ("[abc", 0),
            ("x[", 1),
            (r"\q", 0),
            ("ab\\", 2),
            (r"\x4", 0),
            (r"\x{}", 0),
            (r"\x{110000}", 0),
            (r"\p{L", 0),
            ("(?i)a", 0),
            ("(?=a)", 0),
            ("(?<=a)b", 0),
        ],
    )
    def test_rejected(self, pattern, position):
        with pytest.raises(ParseError) as info:
            parse(pattern)
        assert info.value.position == position
        assert f"at position {position}" in str(info.value)

    def test_bad_group_name(self):
        with pytest.raises(ParseError, match="invalid capture group name"):
            parse("(?P<1x>a)")

    def test_message_names_problem(self):
        with pytest.raises(ParseError, match="unclosed group"):
            parse("(a")
        with pytest.raises(ParseError, match="unclosed character class"):
            parse("[a")


class TestDescribe:
    @pytest.mark.parametrize(
        "pattern,text",
        [
            ("[a-z]", "character class '[a-z]'"),
            (".", "character class '.'"),
            ("^", "anchor '^'"),
            (r"\z", "anchor '\\z'"),
            (r"\b", "word boundary '\\b'"),
            ("a{2,3}", "counted repetition '{2,3}'"),
            ("a{2}", "counted repetition '{2}'"),
            ("a{2,}?", "counted repetition '{2,}?'"),
            ("a*", "repetition '*'"),
            ("(?P<n>a)", "group 'n'"),
        ],
    )
    def test_names(self, pattern, text):
        assert describe(parse(pattern)) == text
