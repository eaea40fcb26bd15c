"""Tinyrouter exception hierarchy.

Shared across the pattern compiler, the path builder, and the Router so
every module raises and catches the same types. Matching never raises:
"no route" is ``None`` from ``match()`` and ``[]`` from ``match_all()``.
"""


class TinyRouterError(Exception):
    """Base for all tinyrouter-specific errors."""


class ConfigurationError(TinyRouterError):
    """Raised when a router or route is configured improperly.

    Only raised during registration, never while matching.
    """


class PatternError(ConfigurationError):
    """A path pattern could not be compiled.

    ``index`` is the offset into ``pattern`` where the problem was found,
    or ``None`` when the error is not tied to a position.
    """

    def __init__(self, message: str, pattern: str = "", index: int | None = None) -> None:
        super().__init__(message)
        self.pattern = pattern
        self.index = index


class PathBuildError(TinyRouterError):
    """Parameters could not be rendered into a path by ``compile_path``."""


class ResolveError(TinyRouterError):
    """A ``module[:attribute]`` target did not lead to a Router."""
