"""Ordered route table with first-match and all-matches lookup.

Routes are tried in registration order; order is the only tie-break.
Register everything up front, then match from as many threads as you
like: matching never mutates the table.
"""

import logging
from collections.abc import Iterator
from typing import Any, Self

from tinyrouter.config import RouteOptions, merge_options
from tinyrouter.errors import ConfigurationError, PatternError
from tinyrouter.routing.params import keys_to_params
from tinyrouter.routing.pattern import PathPatternCompiler, PatternCompiler
from tinyrouter.routing.route import (
    ALL,
    CATCH_ALL,
    METHODS,
    WILDCARD,
    Method,
    MethodWildcard,
    Route,
    RouteMatch,
)

logger = logging.getLogger("tinyrouter.routing")


class Router[H]:
    """Tiny request router, generic over the handler type.

    Usage::

        router: Router[Handler] = Router()
        router.get("/users/:id", show_user).post("/users", create_user)

        match = router.match("GET", "/users/42")
        if match is not None:
            match.handler(**match.params)

    Handlers are opaque: the router stores and returns them, never calls them.
    """

    __slots__ = ("_compiler", "_default_options", "_frozen", "_routes")

    def __init__(
        self,
        *,
        default_options: RouteOptions | None = None,
        compiler: PatternCompiler | None = None,
    ) -> None:
        self._routes: list[Route[H]] = []
        self._default_options = default_options or RouteOptions()
        self._compiler: PatternCompiler = compiler or PathPatternCompiler()
        self._frozen = False

    # -- Introspection ----------------------------------------------------

    @property
    def routes(self) -> tuple[Route[H], ...]:
        """All registered routes, in registration order."""
        return tuple(self._routes)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[Route[H]]:
        return iter(tuple(self._routes))

    def __repr__(self) -> str:
        return f"<Router routes={len(self._routes)} frozen={self._frozen}>"

    def freeze(self) -> None:
        """Make the route table read-only. Later registrations raise."""
        self._frozen = True
        logger.debug("Router frozen with %d route(s)", len(self._routes))

    # -- Registration -----------------------------------------------------

    def add(
        self,
        method: Method | MethodWildcard,
        path: str,
        handler: H,
        options: RouteOptions | None = None,
        **overrides: Any,
    ) -> Self:
        """Compile *path* and append a route for *method*.

        The route is compiled before it is stored, so a rejected pattern
        leaves the table untouched. Keyword *overrides* are applied on top
        of *options* (or the router's default options).

        Raises ``PatternError`` for malformed patterns and
        ``ConfigurationError`` for unknown methods or options, or when the
        router is frozen.
        """
        if self._frozen:
            msg = f"Cannot add {method} {path!r}: router is frozen."
            raise ConfigurationError(msg)
        if method != ALL and method not in METHODS:
            msg = f"Unsupported method {method!r}. Expected one of: {', '.join(sorted(METHODS))}, ALL"
            raise ConfigurationError(msg)

        options = merge_options(options or self._default_options, overrides)
        if path == WILDCARD:
            path = CATCH_ALL

        try:
            matcher, keys = self._compiler.compile(path, options)
        except PatternError as exc:
            logger.debug("Rejected pattern %r for %s: %s", path, method, exc)
            raise

        self._routes.append(
            Route(
                method=method,
                path=path,
                matcher=matcher,
                options=options,
                keys=tuple(keys),
                handler=handler,
            )
        )
        logger.debug("Registered %s %s", method, path)
        return self

    def all(self, path: str, handler: H, options: RouteOptions | None = None, **overrides: Any) -> Self:
        """Add a route that matches any method."""
        return self.add(ALL, path, handler, options, **overrides)

    def get(self, path: str, handler: H, options: RouteOptions | None = None, **overrides: Any) -> Self:
        """Add a route that matches the GET method."""
        return self.add("GET", path, handler, options, **overrides)

    def post(self, path: str, handler: H, options: RouteOptions | None = None, **overrides: Any) -> Self:
        """Add a route that matches the POST method."""
        return self.add("POST", path, handler, options, **overrides)

    def put(self, path: str, handler: H, options: RouteOptions | None = None, **overrides: Any) -> Self:
        """Add a route that matches the PUT method."""
        return self.add("PUT", path, handler, options, **overrides)

    def patch(self, path: str, handler: H, options: RouteOptions | None = None, **overrides: Any) -> Self:
        """Add a route that matches the PATCH method."""
        return self.add("PATCH", path, handler, options, **overrides)

    def delete(self, path: str, handler: H, options: RouteOptions | None = None, **overrides: Any) -> Self:
        """Add a route that matches the DELETE method."""
        return self.add("DELETE", path, handler, options, **overrides)

    def head(self, path: str, handler: H, options: RouteOptions | None = None, **overrides: Any) -> Self:
        """Add a route that matches the HEAD method."""
        return self.add("HEAD", path, handler, options, **overrides)

    def options(self, path: str, handler: H, options: RouteOptions | None = None, **overrides: Any) -> Self:
        """Add a route that matches the OPTIONS method."""
        return self.add("OPTIONS", path, handler, options, **overrides)

    # -- Matching ---------------------------------------------------------

    def match(self, method: str, path: str) -> RouteMatch[H] | None:
        """Return the first route accepting *method* and *path*, or ``None``.

        A catch-all route (``*``) matches without testing the path and
        reports its own pattern as param ``"0"``. A root route registered
        with ``end=False`` matches any path with empty params.
        """
        for route in self._routes:
            if not route.accepts(method):
                continue
            if route.path == CATCH_ALL:
                return RouteMatch(route=route, params={"0": route.path})
            if route.path == "/" and not route.options.end:
                return RouteMatch(route=route, params={})

            captures = route.matcher.test(path)
            if not captures:
                continue
            return RouteMatch(
                route=route,
                params=keys_to_params(captures, route.keys),
                captures=captures,
            )
        return None

    def match_all(self, method: str, path: str) -> list[RouteMatch[H]]:
        """Return every route accepting *method* and *path*, in registration order.

        Every route is tested against the path; there are no shortcuts, so
        a catch-all reports the actual captured path here.
        """
        matches: list[RouteMatch[H]] = []
        for route in self._routes:
            if not route.accepts(method):
                continue
            captures = route.matcher.test(path)
            if not captures:
                continue
            matches.append(
                RouteMatch(
                    route=route,
                    params=keys_to_params(captures, route.keys),
                    captures=captures,
                )
            )
        return matches
