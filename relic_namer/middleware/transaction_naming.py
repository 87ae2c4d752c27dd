"""
Relic Namer — Transaction Naming Middleware
=============================================

What:  Names the monitoring transaction for every HTTP request and attaches
       visitor parameters (client IP, user id, user type).
How:   Names the transaction on arrival, forwards the request, then names it
       again once routing and authentication have run downstream.
Who:   Applied to every request via Starlette middleware.
When:  Installed by relic_namer.main.instrument().

Request lifecycle:
    1. Agent disabled?      → passthrough, recorder untouched
    2. Name + ip_address    → handle NAMED
    3. Ignored?             → handle IGNORED, passthrough
    4. Start                → handle STARTED, call downstream
    5. user_type / user_id  → principal resolved lazily, after downstream
    6. Rename               → routing context may have changed downstream
    7. End                  → always, even if downstream raised

Per-request values (the handle, the principal) are locals of dispatch(); the
middleware instance only holds immutable configuration and collaborators.
"""

import inspect
import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from relic_namer.config import NamingConfig
from relic_namer.naming import TransactionNamer
from relic_namer.principal import Principal, PrincipalResolver, current_principal
from relic_namer.recorders.base import TransactionRecorder
from relic_namer.transaction import TransactionHandle

logger = logging.getLogger(__name__)

AUTHENTICATED_USER_TYPE = "User"


class TransactionNamingMiddleware(BaseHTTPMiddleware):
    """
    Args:
        app:                The wrapped ASGI application.
        config:             Naming snapshot built once at startup.
        recorder:           Monitoring facade shared by all requests.
        principal_resolver: Lookup for the authenticated user; defaults to
                            Starlette's scope["user"].
    """

    def __init__(
        self,
        app: ASGIApp,
        config: NamingConfig,
        recorder: TransactionRecorder,
        principal_resolver: Optional[PrincipalResolver] = None,
    ):
        super().__init__(app)
        self.config = config
        self.recorder = recorder
        self.namer = TransactionNamer(config)
        self.principal_resolver = principal_resolver or current_principal

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not self.recorder.enabled():
            return await call_next(request)

        # Routing has not run yet; names may fall back to the raw path here
        transaction = TransactionHandle(self.recorder)
        transaction.set_name(self.namer.resolve_name(request)).add_parameter(
            "ip_address", self._client_ip(request) if self.config.record_ip_address else None
        )

        if self.namer.is_ignored(request):
            transaction.ignore()
            return await call_next(request)

        transaction.start(transaction.name, capture_params=False)
        error: Optional[BaseException] = None
        try:
            response = await call_next(request)

            principal: Optional[Principal] = None
            if self.config.record_user_id:
                principal = await self._resolve_principal(request)

            transaction.add_parameter(
                "user_type",
                AUTHENTICATED_USER_TYPE if principal is not None else self.config.guest_label,
            ).add_parameter(
                "user_id",
                principal.identifier if principal is not None else None,
            )

            transaction.set_name(self.namer.resolve_name(request))
        except BaseException as exc:
            error = exc
            raise
        finally:
            transaction.end(error)

        return response

    async def _resolve_principal(self, request: Request) -> Optional[Principal]:
        result = self.principal_resolver(request)
        if inspect.isawaitable(result):
            result = await result
        return result

    @staticmethod
    def _client_ip(request: Request) -> Optional[str]:
        return request.client.host if request.client else None
