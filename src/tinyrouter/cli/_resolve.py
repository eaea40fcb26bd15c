"""Locate a Router from a ``module[:attribute]`` target.

The attribute part may be dotted (``myapp.web:routes.api``) and defaults
to ``router``. A Router is never callable, so any callable found there is
taken to be a zero-argument factory and is called once to build one.
"""

import importlib
import inspect
from collections.abc import Callable

from tinyrouter.errors import ResolveError
from tinyrouter.routing.router import Router

DEFAULT_ATTRIBUTE = "router"

_REQUIRED_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)


def _required_params(factory: Callable[..., object]) -> list[str]:
    try:
        signature = inspect.signature(factory)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures: let the call decide.
        return []
    return [
        param.name
        for param in signature.parameters.values()
        if param.kind in _REQUIRED_KINDS and param.default is inspect.Parameter.empty
    ]


def _call_factory(factory: Callable[..., object], target: str) -> object:
    required = _required_params(factory)
    if required:
        msg = (
            f"{target!r} is a factory that needs arguments ({', '.join(required)}); "
            "point at a Router or a factory that takes none"
        )
        raise ResolveError(msg)
    try:
        return factory()
    except Exception as exc:
        msg = f"Router factory {target!r} failed with {type(exc).__name__}: {exc}"
        raise ResolveError(msg) from exc


def resolve_router(target: str) -> Router:
    """Return the Router that *target* names.

    ``"myapp.routes"`` resolves to ``myapp.routes.router``,
    ``"myapp.routes:api"`` to ``myapp.routes.api``, and
    ``"myapp:build_router"`` to the result of calling ``build_router()``.

    Raises ``ResolveError`` when the module cannot be imported, an
    attribute is missing, a factory needs arguments or fails, or the
    result is not a Router.
    """
    module_path, _, attr_path = target.partition(":")
    attr_path = attr_path or DEFAULT_ATTRIBUTE

    try:
        obj: object = importlib.import_module(module_path)
    except ImportError as exc:
        msg = f"Cannot import {module_path!r}: {exc}"
        raise ResolveError(msg) from exc

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as exc:
            msg = f"{target!r}: {type(obj).__name__} has no attribute {attr!r}"
            raise ResolveError(msg) from exc

    if callable(obj):
        obj = _call_factory(obj, target)

    if not isinstance(obj, Router):
        msg = f"{target!r} resolved to {type(obj).__name__}, expected a tinyrouter.Router"
        raise ResolveError(msg)
    return obj
