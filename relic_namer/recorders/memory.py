"""
Relic Namer — In-Memory Recorder
==================================

What:  A recorder that keeps every call in a list instead of talking to an agent.
Who:   The test suite, and developers checking naming rules without New Relic.

Example:
    recorder = InMemoryRecorder()
    ...
    recorder.calls
    # [("set_name", ("/users",)), ("add_parameter", ("ip_address", None)), ...]
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from relic_namer.recorders.base import TransactionRecorder

logger = logging.getLogger(__name__)


class InMemoryRecorder(TransactionRecorder):
    """
    Records calls in order.

    Not isolated per request: concurrent requests interleave in ``calls``.
    """

    def __init__(self, enabled: bool = True):
        self._enabled = enabled
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []

    def _record(self, method: str, *args: Any) -> None:
        logger.debug("recorder.%s%r", method, args)
        self.calls.append((method, args))

    def enabled(self) -> bool:
        return self._enabled

    def set_name(self, name: str) -> None:
        self._record("set_name", name)

    def add_parameter(self, key: str, value: Optional[Any]) -> None:
        self._record("add_parameter", key, value)

    def ignore(self) -> None:
        self._record("ignore")

    def start(self, name: str, capture_params: bool = False) -> None:
        self._record("start", name, capture_params)

    def end(self, error: Optional[BaseException] = None) -> None:
        if error is None:
            self._record("end")
        else:
            self._record("end", error)

    # ── Inspection helpers ────────────────────────────────────────────────

    def methods(self) -> List[str]:
        return [method for method, _ in self.calls]

    def count(self, method: str) -> int:
        return self.methods().count(method)

    @property
    def parameters(self) -> Dict[str, Any]:
        """Last value attached for each parameter key."""
        return {args[0]: args[1] for method, args in self.calls if method == "add_parameter"}

    @property
    def names(self) -> List[str]:
        return [args[0] for method, args in self.calls if method in ("set_name", "start")]

    def reset(self) -> None:
        self.calls.clear()
