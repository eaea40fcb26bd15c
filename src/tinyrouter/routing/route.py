"""Route and RouteMatch frozen dataclasses."""

from dataclasses import dataclass
from typing import Literal

from tinyrouter.config import RouteOptions
from tinyrouter.routing.pattern import Key, Matcher

type Method = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]
type MethodWildcard = Literal["ALL"]

ALL: MethodWildcard = "ALL"
METHODS: frozenset[str] = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"})

# A bare "*" registers as the catch-all group below
WILDCARD = "*"
CATCH_ALL = "(.*)"


@dataclass(frozen=True, slots=True)
class Route[H]:
    """A registered route. Immutable after registration.

    ``keys`` line up with the capture groups ``matcher`` reports.
    """

    method: Method | MethodWildcard
    path: str
    matcher: Matcher
    options: RouteOptions
    keys: tuple[Key, ...]
    handler: H

    def accepts(self, method: str) -> bool:
        """Whether a request with *method* may use this route."""
        return self.method == method or self.method == ALL


@dataclass(frozen=True, slots=True)
class RouteMatch[H]:
    """Result of a successful route match.

    Exposes every field of the matched route alongside the extracted
    ``params``. ``captures`` is the raw capture tuple (whole match first),
    or ``None`` when the route matched without testing the path.
    """

    route: Route[H]
    params: dict[str, str]
    captures: tuple[str | None, ...] | None = None

    @property
    def method(self) -> Method | MethodWildcard:
        return self.route.method

    @property
    def path(self) -> str:
        return self.route.path

    @property
    def matcher(self) -> Matcher:
        return self.route.matcher

    @property
    def options(self) -> RouteOptions:
        return self.route.options

    @property
    def keys(self) -> tuple[Key, ...]:
        return self.route.keys

    @property
    def handler(self) -> H:
        return self.route.handler
