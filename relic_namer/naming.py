"""
Relic Namer — Transaction Naming
==================================

What:  Computes the transaction name for a request and decides whether the
       request is instrumented at all.
How:   An ordered fallback chain over configuration lookups and route
       introspection. Both operations are pure given (request, config).
Who:   TransactionNamingMiddleware, before and after downstream handling.

Name resolution order (first non-empty wins, then config.prefix is prepended):
    1. Rewrite rule for the normalized request path
    2. Live-component messaging endpoint → "livewire.<component>"
    3. Declared route name
    4. Route action identifier (route matched but unnamed)
    5. Raw request path

Ignore patterns are case-sensitive globs where "*" also spans "/". They are
tested independently against the request path, the route name and the full
URL; one match is enough.
"""

import logging
from fnmatch import fnmatchcase
from typing import Iterable, Optional

from starlette.requests import Request

from relic_namer.config import NamingConfig, normalize_path
from relic_namer.routing import MatchedRoute, resolve_route

logger = logging.getLogger(__name__)

# Route name of the live-component messaging endpoint
LIVEWIRE_MESSAGE_ROUTE = "livewire.message"
LIVEWIRE_PREFIX = "livewire."
LIVEWIRE_DEFAULT_COMPONENT = "message"


def matches_any(patterns: Iterable[str], value: Optional[str]) -> bool:
    """True if ``value`` matches any glob pattern exactly or by wildcard."""
    if not value:
        return False
    return any(pattern == value or fnmatchcase(value, pattern) for pattern in patterns)


class TransactionNamer:
    """
    Naming and ignore policy bound to one NamingConfig.

    Holds no per-request state; a single instance is shared by every request
    the middleware handles.
    """

    def __init__(self, config: NamingConfig):
        self.config = config

    # ── Naming ────────────────────────────────────────────────────────────

    def resolve_name(self, request: Request) -> str:
        """Prefixed transaction name for the request. Never empty."""
        route = resolve_route(request)
        name = (
            self.custom_name(request)
            or self.livewire_name(route)
            or (route.name if route else None)
            or (route.action if route else None)
            # Leading "/" kept: prefix "myapp/" gives "myapp//admin/users"
            or request.url.path
        )
        return self.config.prefix + name

    def custom_name(self, request: Request) -> Optional[str]:
        """Rewrite rule registered for the request path, if any."""
        return self.config.rewrite_rules.get(normalize_path(request.url.path))

    @staticmethod
    def livewire_name(route: Optional[MatchedRoute]) -> Optional[str]:
        if route is None or route.name != LIVEWIRE_MESSAGE_ROUTE:
            return None
        return LIVEWIRE_PREFIX + str(route.parameter("name", LIVEWIRE_DEFAULT_COMPONENT))

    # ── Ignore Rules ──────────────────────────────────────────────────────

    def is_ignored(self, request: Request) -> bool:
        patterns = self.config.ignore_patterns
        if not patterns:
            return False

        path_patterns = [normalize_path(p) for p in patterns]
        if matches_any(path_patterns, normalize_path(request.url.path)):
            logger.debug("Ignoring %s: path matched", request.url.path)
            return True

        route = resolve_route(request)
        if route is not None and matches_any(patterns, route.name):
            logger.debug("Ignoring %s: route %s matched", request.url.path, route.name)
            return True

        if matches_any(patterns, str(request.url)):
            logger.debug("Ignoring %s: full URL matched", request.url.path)
            return True

        return False
