"""
Relic Namer — Route Introspection
===================================

What:  Finds the route a request targets and exposes its name, action
       identifier and path parameters.
How:   Prefers the route FastAPI records in scope["route"] while routing.
       Before routing has happened (the middleware's first naming pass), the
       scope is matched against the application's router directly.
Who:   Used by TransactionNamer for naming and ignore checks.

Named vs. unnamed routes:
    Starlette names a route after its endpoint when no name is declared, and
    that name is used as-is. The action identifier (module.qualname of the
    endpoint) is only reached for route objects whose name is empty.
"""

import logging
from typing import Any, Mapping, Optional

from starlette.requests import Request
from starlette.routing import Match, Route

logger = logging.getLogger(__name__)


class MatchedRoute:
    """A matched route as seen by the naming logic."""

    def __init__(
        self,
        name: Optional[str] = None,
        action: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
    ):
        self.name = name
        self.action = action
        self.params = dict(params or {})

    def parameter(self, key: str, default: Any = None) -> Any:
        return self.params.get(key, default)

    def __repr__(self) -> str:
        return f"MatchedRoute(name={self.name!r}, action={self.action!r}, params={self.params!r})"


def action_identifier(endpoint: Any) -> Optional[str]:
    """
    Dotted identifier of a route endpoint, e.g. ``app.routes.users.list_users``.

    Class-based endpoints use the class's qualified name.
    """
    if endpoint is None:
        return None
    qualname = getattr(endpoint, "__qualname__", None) or type(endpoint).__qualname__
    module = getattr(endpoint, "__module__", None)
    return f"{module}.{qualname}" if module else qualname


def _declared_name(route: Any) -> Optional[str]:
    return getattr(route, "name", None) or None


def from_route(route: Any, params: Optional[Mapping[str, Any]] = None) -> MatchedRoute:
    """Wrap a Starlette/FastAPI route object."""
    return MatchedRoute(
        name=_declared_name(route),
        action=action_identifier(getattr(route, "endpoint", None)),
        params=params,
    )


def resolve_route(request: Request) -> Optional[MatchedRoute]:
    """
    Return the route the request targets, or None if nothing matches.

    Only full matches count; a path that matches with the wrong method is
    treated as unrouted. Mounted sub-applications are not descended into.
    """
    scope = request.scope

    route = scope.get("route")
    if route is not None:
        return from_route(route, scope.get("path_params"))

    app = scope.get("app")
    router = getattr(app, "router", None)
    for candidate in getattr(router, "routes", ()):
        if not isinstance(candidate, Route):
            continue
        match, child_scope = candidate.matches(scope)
        if match == Match.FULL:
            return from_route(candidate, child_scope.get("path_params"))

    logger.debug("No route matched %s %s", request.method, request.url.path)
    return None
