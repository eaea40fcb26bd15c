"""Tinyrouter: a tiny request router.

Matches an HTTP method and path against an ordered list of routes and
extracts path parameters. No server, no dispatch: handlers are opaque
values you get back from a match.

Basic usage::

    from tinyrouter import Router

    router: Router[str] = Router()
    router.get("/users/:id", "show_user").all("*", "fallback")

    match = router.match("GET", "/users/42")
    match.handler  # "show_user"
    match.params  # {"id": "42"}

Pattern tools (``path_to_regexp``, ``match_path``, ``compile_path``) are
exported for callers that want to compile patterns themselves.
"""

__version__ = "0.1.0"
__all__ = [
    "ALL",
    "METHODS",
    "ConfigurationError",
    "Key",
    "PathBuildError",
    "PathMatch",
    "PathPatternCompiler",
    "PatternCompiler",
    "PatternError",
    "ResolveError",
    "Route",
    "RouteMatch",
    "RouteOptions",
    "Router",
    "TinyRouterError",
    "compile_path",
    "match_path",
    "parse",
    "path_to_regexp",
    "tokens_to_regexp",
]

# Public name -> defining module. Resolved on first attribute access.
_LAZY_IMPORTS: dict[str, str] = {
    "ALL": "tinyrouter.routing.route",
    "METHODS": "tinyrouter.routing.route",
    "Route": "tinyrouter.routing.route",
    "RouteMatch": "tinyrouter.routing.route",
    "Router": "tinyrouter.routing.router",
    "RouteOptions": "tinyrouter.config",
    "Key": "tinyrouter.routing.pattern",
    "PathPatternCompiler": "tinyrouter.routing.pattern",
    "PatternCompiler": "tinyrouter.routing.pattern",
    "parse": "tinyrouter.routing.pattern",
    "path_to_regexp": "tinyrouter.routing.pattern",
    "tokens_to_regexp": "tinyrouter.routing.pattern",
    "PathMatch": "tinyrouter.routing.params",
    "match_path": "tinyrouter.routing.params",
    "compile_path": "tinyrouter.routing.build",
    "ConfigurationError": "tinyrouter.errors",
    "PathBuildError": "tinyrouter.errors",
    "PatternError": "tinyrouter.errors",
    "ResolveError": "tinyrouter.errors",
    "TinyRouterError": "tinyrouter.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import tinyrouter`` fast while providing a flat top-level API.
    """
    module_path = _LAZY_IMPORTS.get(name)
    if module_path is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    value = getattr(importlib.import_module(module_path), name)
    globals()[name] = value
    return value
