"""
Relic Namer — Authenticated Principal Lookup
==============================================

What:  Resolves the user behind a request, if any.
How:   Reads scope["user"], which Starlette's AuthenticationMiddleware sets to a
       BaseUser. Unauthenticated users and missing middleware both resolve to
       None.
When:  Only after the downstream handler has run, and only when user-id
       recording is enabled.

Applications with their own session handling pass a custom resolver to the
middleware instead; it may be a plain function or a coroutine function.
"""

from typing import Any, Awaitable, Callable, Optional, Union

from starlette.requests import Request


class Principal:
    """The authenticated identity behind a request."""

    def __init__(self, identifier: Any):
        self.identifier = identifier

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Principal) and other.identifier == self.identifier

    def __repr__(self) -> str:
        return f"Principal(identifier={self.identifier!r})"


PrincipalResolver = Callable[
    [Request], Union[Optional[Principal], Awaitable[Optional[Principal]]]
]


def current_principal(request: Request) -> Optional[Principal]:
    """Principal from Starlette's authentication scope, or None."""
    user = request.scope.get("user")
    if user is None or not getattr(user, "is_authenticated", False):
        return None

    # BaseUser.identity is abstract; SimpleUser only implements display_name
    try:
        identifier = user.identity
    except NotImplementedError:
        identifier = user.display_name
    return Principal(identifier)
