"""
Relic Namer — Transaction Handle
==================================

What:  Per-request view of one monitoring transaction, enforcing its lifecycle.
How:   Forwards each call to a TransactionRecorder after checking the current
       state. Illegal transitions raise TransactionStateError.
Who:   Created and owned by a single TransactionNamingMiddleware.dispatch call.

State machine:

    UNSTARTED ──set_name──▶ NAMED ──ignore──▶ IGNORED   (terminal)
                              │
                              └──start──▶ STARTED ──end──▶ ENDED  (terminal)

    - set_name is allowed until the transaction ends (renames while STARTED)
    - add_parameter is allowed while NAMED or STARTED
    - end on an ENDED handle is a no-op
"""

import enum
import logging
from typing import Any, Optional

from relic_namer.exceptions import TransactionStateError
from relic_namer.recorders.base import TransactionRecorder

logger = logging.getLogger(__name__)


class TransactionState(str, enum.Enum):
    UNSTARTED = "unstarted"
    NAMED = "named"
    IGNORED = "ignored"
    STARTED = "started"
    ENDED = "ended"


class TransactionHandle:
    """
    One monitoring transaction, driven through its lifecycle.

    Every method returns the handle itself so calls can be chained:

        handle.set_name("users.index").add_parameter("ip_address", ip)
    """

    def __init__(self, recorder: TransactionRecorder):
        self.recorder = recorder
        self.state = TransactionState.UNSTARTED
        self.name: Optional[str] = None

    def _require(self, operation: str, *allowed: TransactionState) -> None:
        if self.state not in allowed:
            raise TransactionStateError(
                operation, self.state.value, context={"name": self.name}
            )

    def set_name(self, name: str) -> "TransactionHandle":
        self._require(
            "name",
            TransactionState.UNSTARTED,
            TransactionState.NAMED,
            TransactionState.STARTED,
        )
        if self.name is not None and name != self.name:
            logger.debug("Renaming transaction %s -> %s", self.name, name)
        self.name = name
        self.recorder.set_name(name)
        if self.state is TransactionState.UNSTARTED:
            self.state = TransactionState.NAMED
        return self

    def add_parameter(self, key: str, value: Any) -> "TransactionHandle":
        """Attach a custom parameter. ``None`` is passed on as "no value"."""
        self._require("add a parameter to", TransactionState.NAMED, TransactionState.STARTED)
        self.recorder.add_parameter(key, value)
        return self

    def ignore(self) -> "TransactionHandle":
        self._require("ignore", TransactionState.NAMED)
        self.recorder.ignore()
        self.state = TransactionState.IGNORED
        return self

    def start(self, name: str, capture_params: bool = False) -> "TransactionHandle":
        self._require("start", TransactionState.NAMED)
        self.name = name
        self.recorder.start(name, capture_params)
        self.state = TransactionState.STARTED
        return self

    def end(self, error: Optional[BaseException] = None) -> "TransactionHandle":
        if self.state is TransactionState.ENDED:
            return self
        self._require("end", TransactionState.STARTED)
        self.state = TransactionState.ENDED
        self.recorder.end(error)
        return self

    @property
    def ignored(self) -> bool:
        return self.state is TransactionState.IGNORED

    def __repr__(self) -> str:
        return f"TransactionHandle(name={self.name!r}, state={self.state.value!r})"
