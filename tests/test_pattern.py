"""Tests for tinyrouter.routing.pattern: lexer, parser, regex construction."""

import re

import pytest

from tinyrouter.config import RouteOptions
from tinyrouter.errors import PatternError
from tinyrouter.routing.pattern import (
    CompiledPattern,
    Key,
    PathPatternCompiler,
    lex,
    parse,
    path_to_regexp,
    tokens_to_regexp,
)

DEFAULT = "[^/]+?"


def _groups(pattern: str, path: str, **options: object) -> tuple[str | None, ...] | None:
    regex, _ = path_to_regexp(pattern, RouteOptions(**options))  # type: ignore[arg-type]
    found = regex.search(path)
    return found.groups() if found else None


class TestLex:
    def test_kinds(self) -> None:
        kinds = [t.kind for t in lex("/:id(\\d+)?")]
        assert kinds == ["CHAR", "NAME", "PATTERN", "MODIFIER", "END"]

    def test_name_stops_at_non_word_char(self) -> None:
        tokens = lex(":user_id-x")
        assert tokens[0].value == "user_id"
        assert tokens[1].value == "-"

    def test_escaped_char(self) -> None:
        tokens = lex("\\:")
        assert tokens[0].kind == "ESCAPED_CHAR"
        assert tokens[0].value == ":"

    def test_end_token_index(self) -> None:
        tokens = lex("/ab")
        assert tokens[-1].kind == "END"
        assert tokens[-1].index == 3


class TestParse:
    def test_static(self) -> None:
        assert parse("/users") == ["/users"]

    def test_named_param(self) -> None:
        assert parse("/users/:id") == ["/users", Key("id", prefix="/", pattern=DEFAULT)]

    def test_unnamed_groups_are_numbered(self) -> None:
        tokens = parse("/(v1|v2)/:id?/(\\d+)")
        assert tokens == [
            Key(0, prefix="/", pattern="v1|v2"),
            Key("id", prefix="/", pattern=DEFAULT, modifier="?"),
            Key(1, prefix="/", pattern="\\d+"),
        ]

    def test_dot_prefix(self) -> None:
        assert parse(":name.:ext") == [
            Key("name", pattern=DEFAULT),
            Key("ext", prefix=".", pattern=DEFAULT),
        ]

    def test_non_prefix_char_stays_literal(self) -> None:
        assert parse("/a-:id") == ["/a-", Key("id", pattern=DEFAULT)]

    def test_custom_prefixes(self) -> None:
        tokens = parse("/a-:id", RouteOptions(prefixes="-"))
        assert tokens == ["/a", Key("id", prefix="-", pattern=DEFAULT)]

    def test_brace_group(self) -> None:
        assert parse("/icon{-:size}?.png") == [
            "/icon",
            Key("size", prefix="-", pattern=DEFAULT, modifier="?"),
            ".png",
        ]

    def test_brace_group_without_param(self) -> None:
        assert parse("/users{/}?") == ["/users", Key("", prefix="/", modifier="?")]

    def test_escaped_colon_is_literal(self) -> None:
        assert parse("/a\\:b") == ["/a:b"]

    def test_non_capturing_group_allowed(self) -> None:
        assert parse("/:id(a(?:b|c))") == [Key("id", prefix="/", pattern="a(?:b|c)")]

    def test_lookbehind_group_allowed(self) -> None:
        tokens = parse("/:id((?<=/)\\d+)")
        assert tokens == [Key("id", prefix="/", pattern="(?<=/)\\d+")]

    def test_modifier_without_param_is_literal(self) -> None:
        assert parse("/:id/*") == [Key("id", prefix="/", pattern=DEFAULT), "/*"]
        assert parse("/a+") == ["/a+"]

    def test_custom_delimiter_changes_default_pattern(self) -> None:
        tokens = parse(".:part", RouteOptions(delimiter="."))
        assert tokens == [Key("part", prefix=".", pattern="[^\\.]+?")]


class TestParseErrors:
    def test_missing_name(self) -> None:
        with pytest.raises(PatternError, match="Missing parameter name at 1") as exc_info:
            parse("/:")
        assert exc_info.value.index == 1
        assert exc_info.value.pattern == "/:"

    def test_unbalanced(self) -> None:
        with pytest.raises(PatternError, match="Unbalanced pattern at 1"):
            parse("/(foo")

    def test_empty_group(self) -> None:
        with pytest.raises(PatternError, match="Missing pattern at 1"):
            parse("/()")

    def test_group_starting_with_question_mark(self) -> None:
        with pytest.raises(PatternError, match='cannot start with "\\?" at 2'):
            parse("/(?foo)")

    def test_nested_capturing_group(self) -> None:
        with pytest.raises(PatternError, match="Capturing groups are not allowed at 2"):
            parse("/((x))")

    def test_named_group_inside_pattern(self) -> None:
        with pytest.raises(PatternError, match="Capturing groups are not allowed at 4"):
            parse("/:a((?P<x>\\d+))")

    def test_angle_named_group_inside_pattern(self) -> None:
        with pytest.raises(PatternError, match="Capturing groups are not allowed at 6"):
            parse("/:id(a(?<x>b))")

    def test_capture_count_must_match_keys(self) -> None:
        with pytest.raises(PatternError, match=r"2 capture group\(s\) for 1 parameter\(s\)"):
            tokens_to_regexp([Key("a", prefix="/", pattern="(\\d+)")])

    def test_unclosed_brace(self) -> None:
        with pytest.raises(PatternError, match="expected CLOSE"):
            parse("{/:id")

    def test_trailing_escape(self) -> None:
        with pytest.raises(PatternError, match="Trailing escape"):
            parse("/a\\")


class TestPathToRegexp:
    def test_keys(self) -> None:
        _, keys = path_to_regexp("/(v1|v2)/:name/:age")
        assert [k.name for k in keys] == [0, "name", "age"]

    def test_named_params(self) -> None:
        assert _groups("/users/:id", "/users/42") == ("42",)

    def test_trailing_delimiter_allowed_by_default(self) -> None:
        assert _groups("/users/:id", "/users/42/") == ("42",)

    def test_strict_rejects_trailing_delimiter(self) -> None:
        assert _groups("/users/:id", "/users/42/", strict=True) is None

    def test_end_anchored_by_default(self) -> None:
        assert _groups("/users/:id", "/users/42/edit") is None

    def test_end_false_matches_prefix(self) -> None:
        assert _groups("/users/:id", "/users/42/edit", end=False) == ("42",)

    def test_end_false_respects_segment_boundary(self) -> None:
        assert _groups("/users", "/usersx", end=False) is None

    def test_start_false(self) -> None:
        assert _groups("/b", "/a/b", start=False) == ()

    def test_case_insensitive_by_default(self) -> None:
        assert _groups("/LOC", "/loc") == ()

    def test_sensitive(self) -> None:
        assert _groups("/LOC", "/loc", sensitive=True) is None
        assert _groups("/LOC", "/LOC", sensitive=True) == ()

    def test_ends_with(self) -> None:
        assert _groups("/users/:id", "/users/42?page=2", ends_with="?") == ("42",)

    def test_encode_applies_to_literals(self) -> None:
        encode = lambda s: s.replace(" ", "%20")  # noqa: E731
        assert _groups("/hello world", "/hello%20world", encode=encode) == ()

    def test_optional_param(self) -> None:
        assert _groups("/users/:id?", "/users") == (None,)
        assert _groups("/users/:id?", "/users/7") == ("7",)

    def test_one_or_more(self) -> None:
        assert _groups("/files/:path+", "/files/a/b/c") == ("a/b/c",)
        assert _groups("/files/:path+", "/files") is None

    def test_zero_or_more(self) -> None:
        assert _groups("/files/:path*", "/files") == (None,)
        assert _groups("/files/:path*", "/files/a/b") == ("a/b",)

    def test_catch_all_group(self) -> None:
        assert _groups("(.*)", "/anything/at/all") == ("/anything/at/all",)

    def test_literal_regex_chars_escaped(self) -> None:
        assert _groups("/a.b", "/a.b") == ()
        assert _groups("/a.b", "/axb") is None

    def test_invalid_user_regex(self) -> None:
        with pytest.raises(PatternError, match="Invalid regular expression"):
            path_to_regexp("/:id([)")

    def test_compiled_regex_keys(self) -> None:
        source = re.compile(r"^/(?P<slug>[a-z]+)/(\d+)$")
        regex, keys = path_to_regexp(source)
        assert regex is source
        assert keys == [Key("slug"), Key(0)]

    def test_list_of_paths(self) -> None:
        regex, keys = path_to_regexp(["/a/:x", "/b/:y"])
        assert [k.name for k in keys] == ["x", "y"]
        found = regex.search("/b/2")
        assert found is not None
        assert found.groups() == (None, "2")

    def test_tokens_to_regexp_directly(self) -> None:
        regex, keys = tokens_to_regexp(["/static/", Key("file", pattern="[^/]+")])
        assert keys == [Key("file", pattern="[^/]+")]
        assert regex.search("/static/app.js") is not None


class TestKey:
    @pytest.mark.parametrize(
        ("modifier", "optional", "repeat"),
        [("", False, False), ("?", True, False), ("*", True, True), ("+", False, True)],
    )
    def test_flags(self, modifier: str, optional: bool, repeat: bool) -> None:
        key = Key("x", modifier=modifier)
        assert key.optional is optional
        assert key.repeat is repeat


class TestPathPatternCompiler:
    def test_compile_returns_matcher_and_keys(self) -> None:
        matcher, keys = PathPatternCompiler().compile("/users/:id", RouteOptions())
        assert isinstance(matcher, CompiledPattern)
        assert [k.name for k in keys] == ["id"]

    def test_whole_match_first(self) -> None:
        matcher, _ = PathPatternCompiler().compile("/users/:id", RouteOptions())
        assert matcher.test("/users/7") == ("/users/7", "7")

    def test_no_match(self) -> None:
        matcher, _ = PathPatternCompiler().compile("/users/:id", RouteOptions())
        assert matcher.test("/posts/7") is None

    def test_missing_optional_capture_is_none(self) -> None:
        matcher, _ = PathPatternCompiler().compile("/:a/:b?", RouteOptions())
        assert matcher.test("/x") == ("/x", "x", None)
