"""
Relic Namer — Abstract Transaction Recorder Interface
=======================================================

What:  Abstract base class for the monitoring-agent facade.
How:   Concrete recorders inherit from TransactionRecorder and forward each
       call to an agent (or swallow it, or record it for assertions).
Who:   Called by TransactionHandle; enabled() is queried by the middleware.
When:  Once per request for enabled(); the rest only for instrumented requests.

Implementations:
    - NewRelicRecorder: newrelic.agent adapter
    - NullRecorder:     monitoring disabled, every call is a no-op
    - InMemoryRecorder: records calls, for tests and local debugging

Recorders must not keep per-request state on the instance: one recorder is
shared by every request the middleware handles.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class TransactionRecorder(ABC):
    """
    Contract:
        - enabled() is cheap and side-effect free
        - add_parameter() with value None records "no value", never "None"
        - end() after a failed downstream call must still close the transaction,
          and receives the exception so the agent can record it
    """

    @abstractmethod
    def enabled(self) -> bool:
        """True if the monitoring agent is loaded and should be used."""
        ...

    @abstractmethod
    def set_name(self, name: str) -> None:
        """Name (or rename) the current transaction."""
        ...

    @abstractmethod
    def add_parameter(self, key: str, value: Optional[Any]) -> None:
        ...

    @abstractmethod
    def ignore(self) -> None:
        """Drop the current transaction from monitoring."""
        ...

    @abstractmethod
    def start(self, name: str, capture_params: bool = False) -> None:
        """
        Begin timing the transaction under ``name``.

        Args:
            name:           Transaction name, already prefixed.
            capture_params: Whether the agent should record request
                            parameters automatically.
        """
        ...

    @abstractmethod
    def end(self, error: Optional[BaseException] = None) -> None:
        """
        Close the transaction.

        Args:
            error: The exception raised by the downstream handler, if any.
        """
        ...
