"""
Relic Namer — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    ├── recorder: InMemoryRecorder capturing every agent call
    ├── make_request: builds a bare Starlette Request from a path and options
    ├── make_app: FastAPI app with auth + naming middleware and sample routes
    └── make_client: HTTPX AsyncClient bound to an app from make_app
"""

import os
from typing import Any, Dict, Optional

import pytest
from fastapi import FastAPI, HTTPException
from httpx import ASGITransport, AsyncClient
from starlette.authentication import (
    AuthCredentials,
    AuthenticationBackend,
    SimpleUser,
)
from starlette.middleware.authentication import AuthenticationMiddleware
from starlette.requests import Request

from relic_namer.config import NamingConfig
from relic_namer.main import instrument
from relic_namer.recorders import InMemoryRecorder


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Keep a developer's RELIC_NAMER_* exports out of the settings under test
for _key in [k for k in os.environ if k.startswith("RELIC_NAMER_")]:
    del os.environ[_key]
os.environ["RELIC_NAMER_LOG_LEVEL"] = "WARNING"


# ══════════════════════════════════════════════════════════════════════════
# Sample Application
# ══════════════════════════════════════════════════════════════════════════


class HeaderAuthBackend(AuthenticationBackend):
    """Authenticates whoever is named in the X-User header."""

    async def authenticate(self, conn):
        username = conn.headers.get("X-User")
        if not username:
            return None
        return AuthCredentials(["authenticated"]), SimpleUser(username)


async def list_users():
    return {"users": []}


async def show_user(user_id: int):
    return {"id": user_id}


async def livewire_message(name: str):
    return {"component": name}


async def health():
    return {"status": "healthy"}


async def boom():
    raise RuntimeError("downstream exploded")


async def missing():
    raise HTTPException(status_code=404, detail="gone")


def build_app(**instrument_kwargs: Any) -> FastAPI:
    app = FastAPI()
    app.add_api_route("/users", list_users, name="users.index")
    app.add_api_route("/users/{user_id}", show_user)
    app.add_api_route("/livewire/message/{name}", livewire_message, methods=["POST"], name="livewire.message")
    app.add_api_route("/health", health, name="health")
    app.add_api_route("/boom", boom, name="boom")
    app.add_api_route("/missing", missing, name="missing")

    instrument(app, **instrument_kwargs)
    app.add_middleware(AuthenticationMiddleware, backend=HeaderAuthBackend())
    return app


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def recorder():
    return InMemoryRecorder()


@pytest.fixture
def make_request():
    """
    Builds a Starlette Request without running an app.

    Usage:
        request = make_request("/admin/users", route=Route(...), path_params={...})
    """

    def _make(
        path: str = "/",
        *,
        method: str = "GET",
        query_string: bytes = b"",
        route: Any = None,
        path_params: Optional[Dict[str, Any]] = None,
        app: Any = None,
        user: Any = None,
        client: Optional[tuple] = ("203.0.113.7", 51000),
    ) -> Request:
        scope: Dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "raw_path": path.encode(),
            "root_path": "",
            "scheme": "http",
            "server": ("testserver", 80),
            "query_string": query_string,
            "headers": [(b"host", b"testserver")],
            "client": client,
            "path_params": path_params or {},
        }
        if route is not None:
            scope["route"] = route
        if app is not None:
            scope["app"] = app
        if user is not None:
            scope["user"] = user
        return Request(scope)

    return _make


@pytest.fixture
def make_app(recorder):
    """
    FastAPI app wired with the naming middleware and header authentication.

    Usage:
        app = make_app(NamingConfig(prefix="api/"))
    """

    def _make(config: Optional[NamingConfig] = None, **kwargs: Any) -> FastAPI:
        from relic_namer.config import Settings

        source = Settings()
        if config is not None:
            source = Settings(
                http={
                    "prefix": config.prefix,
                    "ignore": list(config.ignore_patterns),
                    "rewrite": dict(config.rewrite_rules),
                    "visitors": {
                        "record_ip_address": config.record_ip_address,
                        "record_user_id": config.record_user_id,
                        "guest_label": config.guest_label,
                    },
                }
            )
        kwargs.setdefault("recorder", recorder)
        return build_app(source=source, **kwargs)

    return _make


@pytest.fixture
def make_client():
    """
    HTTPX client for an ASGI app, used as an async context manager.

    Usage:
        async with make_client(app) as client:
            response = await client.get("/users")
    """

    def _make(app: FastAPI) -> AsyncClient:
        transport = ASGITransport(app=app)
        return AsyncClient(transport=transport, base_url="http://test")

    return _make
