"""Path building: the reverse of matching.

``compile_path("/users/:id")({"id": 42})`` returns ``"/users/42"``.
"""

from collections.abc import Callable, Mapping
from typing import Any

from tinyrouter.config import RouteOptions
from tinyrouter.errors import PathBuildError
from tinyrouter.routing.pattern import Key, Token, compile_regex, parse, regex_flags

type PathBuilder = Callable[[Mapping[str | int, Any] | None], str]


def _lookup(data: Mapping[str | int, Any] | None, key: Key) -> Any:
    if data is None:
        return None
    if key.name in data:
        return data[key.name]
    return data.get(str(key.name))


def tokens_to_function(
    tokens: list[Token],
    options: RouteOptions | None = None,
    *,
    encode: Callable[[str], str] | None = None,
    validate: bool = True,
) -> PathBuilder:
    """Create a builder that renders *tokens* with the given params.

    Raises ``PathBuildError`` (when called) for missing required params,
    lists given to non-repeating params, empty lists for required repeating
    params, and, when *validate* is set, values not matching the param's
    pattern.
    """
    options = options or RouteOptions()
    flags = regex_flags(options)
    checks = {
        index: compile_regex(rf"^(?:{token.pattern})\Z", flags)
        for index, token in enumerate(tokens)
        if isinstance(token, Key) and token.pattern
    }

    def _encode(value: str) -> str:
        return encode(value) if encode is not None else value

    def _segment(index: int, key: Key, value: Any) -> str:
        segment = _encode(str(value))
        if validate and not checks[index].match(segment):
            msg = f'Expected all "{key.name}" to match "{key.pattern}", but got "{segment}"'
            raise PathBuildError(msg)
        return f"{key.prefix}{segment}{key.suffix}"

    def builder(data: Mapping[str | int, Any] | None = None) -> str:
        path = ""
        for index, token in enumerate(tokens):
            if isinstance(token, str):
                path += token
                continue

            if not token.pattern:
                if not token.optional:
                    path += token.prefix + token.suffix
                continue

            value = _lookup(data, token)

            if isinstance(value, list | tuple):
                if not token.repeat:
                    msg = f'Expected "{token.name}" to not repeat, but got an array'
                    raise PathBuildError(msg)
                if not value:
                    if token.optional:
                        continue
                    msg = f'Expected "{token.name}" to not be empty'
                    raise PathBuildError(msg)
                path += "".join(_segment(index, token, item) for item in value)
                continue

            if isinstance(value, str | int | float) and not isinstance(value, bool):
                path += _segment(index, token, value)
                continue

            if token.optional:
                continue

            expected = "an array" if token.repeat else "a string"
            msg = f'Expected "{token.name}" to be {expected}'
            raise PathBuildError(msg)

        return path

    return builder


def compile_path(
    pattern: str,
    options: RouteOptions | None = None,
    *,
    encode: Callable[[str], str] | None = None,
    validate: bool = True,
) -> PathBuilder:
    """Compile *pattern* into a path builder.

    Usage::

        to_path = compile_path("/user/:id(\\\\d+)")
        to_path({"id": 123})  # "/user/123"
        to_path({"id": "abc"})  # raises PathBuildError
    """
    return tokens_to_function(parse(pattern, options), options, encode=encode, validate=validate)
