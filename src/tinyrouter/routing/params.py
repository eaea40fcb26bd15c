"""Path parameter extraction.

Pairs the captures a matcher produced with the keys of the pattern that
produced them.
"""

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from tinyrouter.config import RouteOptions
from tinyrouter.routing.pattern import Key, path_to_regexp


def keys_to_params(captures: Sequence[str | None], keys: Sequence[Key]) -> dict[str, str]:
    """Build a params mapping from raw *captures* (whole match first).

    Capture ``i + 1`` pairs with key ``i``. Unnamed keys become ``"0"``,
    ``"1"``, ... Groups that did not participate are omitted, not ``None``.
    """
    params: dict[str, str] = {}
    for key, value in zip(keys, captures[1:], strict=False):
        if value is not None:
            params[str(key.name)] = value
    return params


@dataclass(frozen=True, slots=True)
class PathMatch:
    """Result of a ``match_path`` call.

    ``params`` values are tuples for repeated (``*``/``+``) parameters.
    """

    path: str
    index: int
    params: dict[str, str | tuple[str, ...]]


def regexp_to_function(
    regex: re.Pattern[str],
    keys: Sequence[Key],
    *,
    decode: Callable[[str], str] | None = None,
) -> Callable[[str], PathMatch | None]:
    """Wrap a compiled pattern into a ``path -> PathMatch | None`` function."""

    def _decode(value: str) -> str:
        return decode(value) if decode is not None else value

    def matcher(path: str) -> PathMatch | None:
        found = regex.search(path)
        if found is None:
            return None

        params: dict[str, str | tuple[str, ...]] = {}
        for key, value in zip(keys, found.groups(), strict=False):
            if value is None:
                continue
            if key.repeat:
                separator = key.prefix + key.suffix
                pieces = value.split(separator) if separator else [value]
                params[str(key.name)] = tuple(_decode(piece) for piece in pieces)
            else:
                params[str(key.name)] = _decode(value)
        return PathMatch(path=found.group(0), index=found.start(), params=params)

    return matcher


def match_path(
    pattern: str | re.Pattern[str] | list[str],
    options: RouteOptions | None = None,
    *,
    decode: Callable[[str], str] | None = None,
) -> Callable[[str], PathMatch | None]:
    """Compile *pattern* into a standalone matching function.

    Usage::

        match = match_path("/files/:path+", decode=urllib.parse.unquote)
        match("/files/a/b%20c")
        # PathMatch(path="/files/a/b%20c", index=0, params={"path": ("a", "b c")})
    """
    regex, keys = path_to_regexp(pattern, options)
    return regexp_to_function(regex, keys, decode=decode)
