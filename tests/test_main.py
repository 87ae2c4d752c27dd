"""
Relic Namer — Application Wiring Tests
========================================

What:  Tests for instrument(), build_recorder() and setup_logging().
"""

import logging

import pytest
from fastapi import FastAPI

from relic_namer.config import Settings
from relic_namer.main import build_recorder, instrument, setup_logging
from relic_namer.middleware import TransactionNamingMiddleware
from relic_namer.recorders import InMemoryRecorder, NewRelicRecorder, NullRecorder


class TestBuildRecorder:
    def test_disabled_gives_null_recorder(self):
        assert isinstance(build_recorder(Settings(enabled=False)), NullRecorder)

    def test_enabled_gives_newrelic_recorder(self):
        recorder = build_recorder(Settings(transaction_group="Uri"))
        assert isinstance(recorder, NewRelicRecorder)
        assert recorder.group == "Uri"

    def test_null_recorder_is_disabled(self):
        assert NullRecorder().enabled() is False


class TestInstrument:
    def test_registers_middleware(self):
        app = FastAPI()
        recorder = InMemoryRecorder()

        config = instrument(app, Settings(http={"prefix": "svc/"}), recorder=recorder)

        assert config.prefix == "svc/"
        registered = [m for m in app.user_middleware if m.cls is TransactionNamingMiddleware]
        assert len(registered) == 1
        assert registered[0].kwargs["recorder"] is recorder
        assert registered[0].kwargs["config"] is config

    @pytest.mark.asyncio
    async def test_instrumented_app_records(self, make_client):
        app = FastAPI()

        @app.get("/ping", name="health.ping")
        async def ping():
            return {"pong": True}

        recorder = InMemoryRecorder()
        instrument(app, Settings(), recorder=recorder)

        async with make_client(app) as client:
            response = await client.get("/ping")

        assert response.json() == {"pong": True}
        assert recorder.names == ["health.ping", "health.ping", "health.ping"]
        assert recorder.parameters["user_type"] == "Guest"


class TestSetupLogging:
    def test_root_level_follows_settings(self):
        setup_logging(Settings(log_level="DEBUG"))
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("newrelic").level == logging.WARNING

        setup_logging(Settings(log_level="WARNING"))
        assert logging.getLogger().level == logging.WARNING
