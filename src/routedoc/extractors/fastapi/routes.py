from __future__ import annotations

import importlib
from typing import Any, Iterable, Iterator

import fastapi.routing
from fastapi.routing import APIRoute
from starlette.routing import Mount
from starlette.routing import Route as StarletteRoute

from routedoc.domain.routes import HandlerIdentity, Route
from routedoc.lib.logging_utils import get_logger

logger = get_logger(__name__)

_METHOD_ORDER = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD")

# newer FastAPI keeps included routers as wrappers in app.routes
_iter_route_contexts = getattr(fastapi.routing, "iter_route_contexts", None)


def _ordered_methods(methods: Iterable[str] | None, implicit_head: bool = False) -> tuple[str, ...]:
    if not methods:
        return ()
    upper = {m.upper() for m in methods}
    # plain Starlette routes get HEAD added next to GET on their own
    if implicit_head and "GET" in upper:
        upper.discard("HEAD")
    known = [m for m in _METHOD_ORDER if m in upper]
    extra = sorted(upper - set(_METHOD_ORDER))
    return tuple(known + extra)


def _join(prefix: str, path: str) -> str:
    if not prefix:
        return path
    return prefix.rstrip("/") + "/" + path.lstrip("/") if path else prefix


def _iter_http_routes(routes: Iterable[Any], prefix: str = "") -> Iterator[tuple[str, StarletteRoute]]:
    for r in routes:
        if isinstance(r, StarletteRoute):
            yield _join(prefix, r.path), r
        elif isinstance(r, Mount):
            yield from _iter_http_routes(r.routes, _join(prefix, r.path))
        elif _iter_route_contexts is not None:
            for ctx in _iter_route_contexts([r]):
                if isinstance(ctx.route, StarletteRoute):
                    yield _join(prefix, ctx.route.path), ctx.route
                else:
                    logger.debug("Not documenting route of type %s", type(ctx.route).__name__)
        else:
            logger.debug("Not documenting route of type %s", type(r).__name__)


def routes_from_app(app: Any) -> list[Route]:
    """
    Snapshot of the HTTP routes registered on a FastAPI/Starlette app.

    APIRoute is a Starlette Route subclass, so both are accepted. Mounted
    sub-applications are walked with the mount path as prefix; websocket
    routes and routes hidden from the schema are skipped.
    """
    out: list[Route] = []
    for path, r in _iter_http_routes(getattr(app, "routes", [])):
        if not getattr(r, "include_in_schema", True):
            logger.debug("Route %s excluded from schema", path)
            continue

        out.append(
            Route(
                uri_patterns=(path,),
                methods=_ordered_methods(r.methods, implicit_head=not isinstance(r, APIRoute)),
                handler=HandlerIdentity.from_callable(r.endpoint),
            )
        )
    return out


def load_app(import_path: str) -> Any:
    """Import "pkg.module:attr" (uvicorn style)."""
    module_name, sep, attr = import_path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Expected 'module:attribute', got {import_path!r}")

    module = importlib.import_module(module_name)
    obj: Any = module
    for part in attr.split("."):
        obj = getattr(obj, part)
    return obj
