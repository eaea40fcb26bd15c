"""Route configuration.

RouteOptions is a frozen dataclass, immutable after creation and safe to share
between routes.
"""

from collections.abc import Callable
from dataclasses import dataclass, fields, replace
from typing import Any

from tinyrouter.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class RouteOptions:
    """Options controlling how a path pattern is compiled. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        options = RouteOptions(sensitive=True, end=False)
    """

    # Matching
    sensitive: bool = False  # Case-sensitive literal matching
    strict: bool = False  # Trailing delimiter must match exactly
    end: bool = True  # Anchor to the end of the path
    start: bool = True  # Anchor to the start of the path

    # Syntax
    delimiter: str = "/"  # Segment separator; default params stop here
    ends_with: str = ""  # Extra characters accepted as the end of a match
    prefixes: str = "./"  # Characters that become a param's optional prefix

    # Applied to literal text before it is compiled into the regex
    encode: Callable[[str], str] | None = None

    def encode_token(self, value: str) -> str:
        """Run ``encode`` over *value*, or return it unchanged."""
        if self.encode is None:
            return value
        return self.encode(value)


_OPTION_NAMES = frozenset(f.name for f in fields(RouteOptions))


def merge_options(base: RouteOptions, overrides: dict[str, Any]) -> RouteOptions:
    """Return *base* with keyword *overrides* applied.

    Raises ``ConfigurationError`` for names RouteOptions does not define.
    """
    if not overrides:
        return base
    unknown = set(overrides) - _OPTION_NAMES
    if unknown:
        msg = f"Unknown route option(s): {', '.join(sorted(unknown))}"
        raise ConfigurationError(msg)
    return replace(base, **overrides)
