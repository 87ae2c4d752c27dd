"""
Relic Namer — Application Wiring
==================================

What:  Installs the transaction naming middleware on a Starlette/FastAPI app.
How:   Builds the NamingConfig snapshot and a recorder from Settings once, then
       registers TransactionNamingMiddleware with both injected.
Who:   Called by the host application's factory.
When:  Once at startup, before the app serves requests.

Usage:
    from fastapi import FastAPI
    from relic_namer.main import instrument, setup_logging

    def create_app() -> FastAPI:
        app = FastAPI()
        setup_logging()
        instrument(app)
        app.include_router(users.router)
        return app
"""

import logging
import sys
from typing import Optional

from starlette.applications import Starlette

from relic_namer.config import NamingConfig, Settings, settings as default_settings
from relic_namer.middleware.transaction_naming import TransactionNamingMiddleware
from relic_namer.principal import PrincipalResolver
from relic_namer.recorders import NewRelicRecorder, NullRecorder, TransactionRecorder

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(source: Optional[Settings] = None) -> None:
    """
    Configure root logging at the configured level.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    source = source or default_settings
    logging.basicConfig(
        level=getattr(logging, source.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # The agent logs every harvest cycle at INFO
    logging.getLogger("newrelic").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Middleware Installation
# ══════════════════════════════════════════════════════════════════════════

def build_recorder(source: Settings) -> TransactionRecorder:
    """NewRelicRecorder when enabled in settings, otherwise NullRecorder."""
    if not source.enabled:
        return NullRecorder()
    return NewRelicRecorder(group=source.transaction_group)


def instrument(
    app: Starlette,
    source: Optional[Settings] = None,
    recorder: Optional[TransactionRecorder] = None,
    principal_resolver: Optional[PrincipalResolver] = None,
) -> NamingConfig:
    """
    Add TransactionNamingMiddleware to ``app``.

    Args:
        app:                Starlette or FastAPI application.
        source:             Settings to read; the module singleton by default.
        recorder:           Overrides the recorder chosen from settings.
        principal_resolver: Overrides the scope["user"] principal lookup.

    Returns:
        The NamingConfig snapshot the middleware was given.
    """
    source = source or default_settings
    config = NamingConfig.from_settings(source)
    recorder = recorder or build_recorder(source)

    app.add_middleware(
        TransactionNamingMiddleware,
        config=config,
        recorder=recorder,
        principal_resolver=principal_resolver,
    )

    logger.info(
        "Transaction naming enabled: recorder=%s prefix=%r rewrites=%d ignores=%d",
        type(recorder).__name__,
        config.prefix,
        len(config.rewrite_rules),
        len(config.ignore_patterns),
    )
    return config
