"""Path pattern compilation.

Turns route strings like ``/users/:id(\\d+)`` or ``/files/:path*`` into a
compiled regular expression plus the ordered list of parameter keys its
capture groups correspond to.

Syntax::

    /users/:id           named parameter, default pattern [^/]+?
    /users/:id(\\d+)     named parameter with a custom pattern
    /(v1|v2)/users       unnamed parameter, keyed 0, 1, ...
    /files/:path*        modifiers: ? optional, * zero or more, + one or more
    /icon{-:size}?.png   brace group with a custom prefix/suffix
    /literal\\:colon     backslash escapes the next character

The Router only depends on the ``PatternCompiler`` protocol, so another
engine can be plugged in without touching route storage or matching.
"""

import re
import string
from dataclasses import dataclass
from typing import Literal, Protocol

from tinyrouter.config import RouteOptions
from tinyrouter.errors import PatternError

type TokenKind = Literal[
    "OPEN", "CLOSE", "PATTERN", "NAME", "CHAR", "ESCAPED_CHAR", "MODIFIER", "END"
]

_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_")
_MODIFIERS = frozenset("*+?")
_DEFAULT_OPTIONS = RouteOptions()


@dataclass(frozen=True, slots=True)
class LexToken:
    """A single lexical token of a path pattern."""

    kind: TokenKind
    index: int
    value: str


@dataclass(frozen=True, slots=True)
class Key:
    """A parameter parsed out of a path pattern.

    Named:    ``/:id``      -> Key(name="id", prefix="/", pattern="[^/]+?")
    Unnamed:  ``/(\\d+)``   -> Key(name=0, prefix="/", pattern="\\d+")
    Repeated: ``/:path+``   -> Key(name="path", prefix="/", ..., modifier="+")
    """

    name: str | int
    prefix: str = ""
    suffix: str = ""
    pattern: str = ""
    modifier: str = ""

    @property
    def optional(self) -> bool:
        return self.modifier in ("?", "*")

    @property
    def repeat(self) -> bool:
        return self.modifier in ("*", "+")


type Token = str | Key


# -- Lexer ----------------------------------------------------------------


def lex(pattern: str) -> list[LexToken]:
    """Split *pattern* into tokens, always terminated by an ``END`` token.

    Raises ``PatternError`` for empty parameter names, unbalanced or empty
    groups, and capturing groups nested inside a custom pattern.
    """
    tokens: list[LexToken] = []
    i = 0
    size = len(pattern)

    while i < size:
        char = pattern[i]

        if char in _MODIFIERS:
            tokens.append(LexToken("MODIFIER", i, char))
            i += 1
        elif char == "\\":
            if i + 1 >= size:
                msg = f"Trailing escape character at {i}"
                raise PatternError(msg, pattern, i)
            tokens.append(LexToken("ESCAPED_CHAR", i, pattern[i + 1]))
            i += 2
        elif char == "{":
            tokens.append(LexToken("OPEN", i, char))
            i += 1
        elif char == "}":
            tokens.append(LexToken("CLOSE", i, char))
            i += 1
        elif char == ":":
            end = i + 1
            while end < size and pattern[end] in _NAME_CHARS:
                end += 1
            if end == i + 1:
                msg = f"Missing parameter name at {i}"
                raise PatternError(msg, pattern, i)
            tokens.append(LexToken("NAME", i, pattern[i + 1 : end]))
            i = end
        elif char == "(":
            token, i = _lex_group(pattern, i)
            tokens.append(token)
        else:
            tokens.append(LexToken("CHAR", i, char))
            i += 1

    tokens.append(LexToken("END", i, ""))
    return tokens


def _is_named_group(pattern: str, i: int) -> bool:
    """Whether the group opening at *i* is a named (capturing) group."""
    if pattern.startswith("(?P<", i):
        return True
    return pattern.startswith("(?<", i) and pattern[i + 3 : i + 4] not in ("=", "!")


def _lex_group(pattern: str, start: int) -> tuple[LexToken, int]:
    """Read a ``(...)`` custom pattern starting at *start*.

    Returns the token and the index just past the closing parenthesis.
    """
    depth = 1
    i = start + 1
    size = len(pattern)
    body: list[str] = []

    if i < size and pattern[i] == "?":
        msg = f'Pattern cannot start with "?" at {i}'
        raise PatternError(msg, pattern, i)

    while i < size:
        char = pattern[i]
        if char == "\\":
            body.append(pattern[i : i + 2])
            i += 2
            continue
        if char == ")":
            depth -= 1
            if depth == 0:
                i += 1
                break
        elif char == "(":
            depth += 1
            if pattern[i + 1 : i + 2] != "?" or _is_named_group(pattern, i):
                msg = f"Capturing groups are not allowed at {i}"
                raise PatternError(msg, pattern, i)
        body.append(char)
        i += 1

    if depth:
        msg = f"Unbalanced pattern at {start}"
        raise PatternError(msg, pattern, start)
    if not body:
        msg = f"Missing pattern at {start}"
        raise PatternError(msg, pattern, start)

    return LexToken("PATTERN", start, "".join(body)), i


# -- Parser ---------------------------------------------------------------


class _Cursor:
    """Sequential reader over lexer tokens."""

    __slots__ = ("_pattern", "_pos", "_tokens")

    def __init__(self, pattern: str, tokens: list[LexToken]) -> None:
        self._pattern = pattern
        self._tokens = tokens
        self._pos = 0

    @property
    def done(self) -> bool:
        return self._pos >= len(self._tokens)

    def try_consume(self, kind: TokenKind) -> str | None:
        if self._pos < len(self._tokens) and self._tokens[self._pos].kind == kind:
            value = self._tokens[self._pos].value
            self._pos += 1
            return value
        return None

    def must_consume(self, kind: TokenKind) -> str:
        value = self.try_consume(kind)
        if value is not None:
            return value
        token = self._tokens[self._pos]
        msg = f"Unexpected {token.kind} at {token.index}, expected {kind}"
        raise PatternError(msg, self._pattern, token.index)

    def consume_text(self) -> str:
        text = ""
        while True:
            value = self.try_consume("CHAR") or self.try_consume("ESCAPED_CHAR")
            if not value:
                return text
            text += value


def default_param_pattern(options: RouteOptions) -> str:
    """Regex used for parameters that do not declare their own pattern."""
    return f"[^{re.escape(options.delimiter or '/')}]+?"


def parse(pattern: str, options: RouteOptions | None = None) -> list[Token]:
    """Parse *pattern* into literal strings and parameter keys.

    Examples::

        "/users"        -> ["/users"]
        "/users/:id"    -> ["/users", Key("id", prefix="/", pattern="[^/]+?")]
        "/(v1|v2)/:id?" -> [Key(0, prefix="/", pattern="v1|v2"),
                            Key("id", prefix="/", pattern="[^/]+?", modifier="?")]
    """
    options = options or _DEFAULT_OPTIONS
    cursor = _Cursor(pattern, lex(pattern))
    default_pattern = default_param_pattern(options)

    result: list[Token] = []
    next_index = 0
    path = ""

    while not cursor.done:
        char = cursor.try_consume("CHAR")
        name = cursor.try_consume("NAME")
        group = cursor.try_consume("PATTERN")

        if name is not None or group is not None:
            prefix = char or ""
            if prefix not in options.prefixes:
                path += prefix
                prefix = ""
            if path:
                result.append(path)
                path = ""

            key_name: str | int
            if name:
                key_name = name
            else:
                key_name = next_index
                next_index += 1
            result.append(
                Key(
                    name=key_name,
                    prefix=prefix,
                    pattern=group or default_pattern,
                    modifier=cursor.try_consume("MODIFIER") or "",
                )
            )
            continue

        # A modifier with no parameter before it is literal text
        value = char or cursor.try_consume("ESCAPED_CHAR") or cursor.try_consume("MODIFIER")
        if value:
            path += value
            continue

        if path:
            result.append(path)
            path = ""

        if cursor.try_consume("OPEN") is not None:
            prefix = cursor.consume_text()
            name = cursor.try_consume("NAME") or ""
            group = cursor.try_consume("PATTERN") or ""
            suffix = cursor.consume_text()
            cursor.must_consume("CLOSE")

            if name:
                key_name = name
            elif group:
                key_name = next_index
                next_index += 1
            else:
                key_name = ""
            result.append(
                Key(
                    name=key_name,
                    prefix=prefix,
                    suffix=suffix,
                    pattern=default_pattern if name and not group else group,
                    modifier=cursor.try_consume("MODIFIER") or "",
                )
            )
            continue

        cursor.must_consume("END")

    return result


# -- Regex construction ---------------------------------------------------


def compile_regex(source: str, flags: int, pattern: str = "") -> re.Pattern[str]:
    """``re.compile`` that reports invalid user regex as ``PatternError``."""
    try:
        return re.compile(source, flags)
    except re.error as exc:
        msg = f"Invalid regular expression {source!r}: {exc}"
        raise PatternError(msg, pattern, exc.pos) from exc


def regex_flags(options: RouteOptions) -> int:
    return 0 if options.sensitive else re.IGNORECASE


def tokens_to_regexp(
    tokens: list[Token],
    options: RouteOptions | None = None,
    *,
    pattern: str = "",
) -> tuple[re.Pattern[str], list[Key]]:
    """Build the regular expression for parsed *tokens*.

    Returns the compiled regex and the keys whose capture groups it
    contains, in group order.
    """
    options = options or _DEFAULT_OPTIONS
    delimiter_re = f"[{re.escape(options.delimiter or '/')}]"
    ends_with_re = rf"[{re.escape(options.ends_with)}]|\Z" if options.ends_with else r"\Z"

    parts: list[str] = ["^"] if options.start else []
    keys: list[Key] = []

    for token in tokens:
        if isinstance(token, str):
            parts.append(re.escape(options.encode_token(token)))
            continue

        prefix = re.escape(options.encode_token(token.prefix))
        suffix = re.escape(options.encode_token(token.suffix))

        if not token.pattern:
            parts.append(f"(?:{prefix}{suffix}){token.modifier}")
            continue

        keys.append(token)
        if prefix or suffix:
            if token.repeat:
                optional = "?" if token.modifier == "*" else ""
                parts.append(
                    f"(?:{prefix}((?:{token.pattern})"
                    f"(?:{suffix}{prefix}(?:{token.pattern}))*){suffix}){optional}"
                )
            else:
                parts.append(f"(?:{prefix}({token.pattern}){suffix}){token.modifier}")
        elif token.repeat:
            parts.append(f"((?:{token.pattern}){token.modifier})")
        else:
            parts.append(f"({token.pattern}){token.modifier}")

    if options.end:
        if not options.strict:
            parts.append(f"{delimiter_re}?")
        parts.append(f"(?={ends_with_re})" if options.ends_with else r"\Z")
    else:
        last = tokens[-1] if tokens else None
        if isinstance(last, str):
            end_delimited = last[-1] in (options.delimiter or "/")
        else:
            end_delimited = last is None
        if not options.strict:
            parts.append(f"(?:{delimiter_re}(?={ends_with_re}))?")
        if not end_delimited:
            parts.append(f"(?={delimiter_re}|{ends_with_re})")

    regex = compile_regex("".join(parts), regex_flags(options), pattern)
    if regex.groups != len(keys):
        msg = f"Pattern has {regex.groups} capture group(s) for {len(keys)} parameter(s)"
        raise PatternError(msg, pattern)
    return regex, keys


def path_to_regexp(
    path: str | re.Pattern[str] | list[str],
    options: RouteOptions | None = None,
) -> tuple[re.Pattern[str], list[Key]]:
    """Compile *path* into a regex and its ordered parameter keys.

    *path* may be a pattern string, an already compiled regex (its groups
    become keys, named groups keep their names), or a list of pattern
    strings matched as alternatives.
    """
    options = options or _DEFAULT_OPTIONS

    if isinstance(path, re.Pattern):
        names = {index: name for name, index in path.groupindex.items()}
        keys: list[Key] = []
        unnamed = 0
        for group in range(1, path.groups + 1):
            if group in names:
                keys.append(Key(name=names[group]))
            else:
                keys.append(Key(name=unnamed))
                unnamed += 1
        return path, keys

    if isinstance(path, list):
        sources: list[str] = []
        keys = []
        for item in path:
            regex, item_keys = path_to_regexp(item, options)
            sources.append(regex.pattern)
            keys.extend(item_keys)
        joined = f"(?:{'|'.join(sources)})"
        return compile_regex(joined, regex_flags(options), " | ".join(path)), keys

    return tokens_to_regexp(parse(path, options), options, pattern=path)


# -- Pluggable compiler ---------------------------------------------------


class Matcher(Protocol):
    """A compiled pattern that can be tested against request paths."""

    def test(self, path: str) -> tuple[str | None, ...] | None:
        """Return the whole match followed by every capture, or ``None``."""
        ...


class PatternCompiler(Protocol):
    """Turns a route pattern into a matcher and its parameter keys."""

    def compile(self, pattern: str, options: RouteOptions) -> tuple[Matcher, list[Key]]: ...


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """Regex-backed ``Matcher``. Searches, so anchoring comes from the regex."""

    regex: re.Pattern[str]

    def test(self, path: str) -> tuple[str | None, ...] | None:
        found = self.regex.search(path)
        if found is None:
            return None
        return (found.group(0), *found.groups())


class PathPatternCompiler:
    """Default ``PatternCompiler`` built on ``path_to_regexp``."""

    __slots__ = ()

    def compile(self, pattern: str, options: RouteOptions) -> tuple[CompiledPattern, list[Key]]:
        regex, keys = path_to_regexp(pattern, options)
        return CompiledPattern(regex), keys
