"""
Relic Namer — New Relic Recorder
==================================

What:  TransactionRecorder backed by the New Relic Python agent.
How:   Two deployment shapes are supported:

       1. Agent-instrumented app (newrelic-admin run-program, or the ASGI
          wrapper): a transaction already exists for the request. start()
          renames it and end() leaves closing it to the agent.
       2. Plain app with the agent imported but not wrapping it: start() opens
          a newrelic.agent.WebTransaction and end() closes it.

Per-request state:
    The transaction opened in case 2, and parameters attached before any
    transaction exists, are kept in a ContextVar. Each ASGI request runs in
    its own task with its own copy of the context, so one recorder instance
    is safe to share across concurrent requests.
"""

import logging
from contextlib import ExitStack
from contextvars import ContextVar
from typing import Any, Dict, Optional

import newrelic.agent

from relic_namer.recorders.base import TransactionRecorder

logger = logging.getLogger(__name__)


class _RequestState:
    def __init__(self) -> None:
        self.pending: Dict[str, Any] = {}
        self.stack: Optional[ExitStack] = None


_request_state: ContextVar[Optional[_RequestState]] = ContextVar(
    "relic_namer_request_state", default=None
)


def _state() -> _RequestState:
    state = _request_state.get()
    if state is None:
        state = _RequestState()
        _request_state.set(state)
    return state


class NewRelicRecorder(TransactionRecorder):
    """
    Args:
        group: New Relic name group, reported as WebTransaction/<group>/<name>.
    """

    def __init__(self, group: str = "Function"):
        self.group = group

    def enabled(self) -> bool:
        return bool(newrelic.agent.global_settings().monitor_mode)

    def set_name(self, name: str) -> None:
        if newrelic.agent.current_transaction() is None:
            return
        newrelic.agent.set_transaction_name(name, group=self.group)

    def add_parameter(self, key: str, value: Optional[Any]) -> None:
        if value is None:
            return
        if newrelic.agent.current_transaction() is None:
            _state().pending[key] = value
            return
        newrelic.agent.add_custom_attribute(key, value)

    def ignore(self) -> None:
        _request_state.set(None)
        if newrelic.agent.current_transaction() is None:
            return
        newrelic.agent.ignore_transaction(flag=True)

    def start(self, name: str, capture_params: bool = False) -> None:
        state = _state()
        transaction = newrelic.agent.current_transaction()

        if transaction is None:
            stack = ExitStack()
            transaction = stack.enter_context(
                newrelic.agent.WebTransaction(
                    newrelic.agent.application(), name, group=self.group
                )
            )
            state.stack = stack
            logger.debug("Opened New Relic transaction %s", name)
        else:
            newrelic.agent.set_transaction_name(name, group=self.group)

        transaction.capture_params = capture_params

        for key, value in state.pending.items():
            newrelic.agent.add_custom_attribute(key, value)
        state.pending.clear()

    def end(self, error: Optional[BaseException] = None) -> None:
        """
        Close a transaction this recorder opened.

        An agent-owned transaction sees the error itself as it propagates
        through the agent's wrapper, so nothing is reported here for it.
        """
        state = _request_state.get()
        _request_state.set(None)
        if state is None or state.stack is None:
            return
        if error is None:
            state.stack.close()
        else:
            state.stack.__exit__(type(error), error, error.__traceback__)
        logger.debug("Closed New Relic transaction")
