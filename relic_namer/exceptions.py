"""
Relic Namer — Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions raised by the naming middleware.
How:   Each exception class carries a message and optional context dict,
       mirroring how errors are reported to the log.
Who:   Raised by TransactionHandle when it is driven out of order.
When:  Only on programming errors; missing routes, principals or config values
       are fallbacks, never exceptions.

Exception Hierarchy:
    RelicNamerError (base)
    └── TransactionStateError    → illegal transaction lifecycle transition

Downstream handler failures are NOT wrapped: they propagate to the caller
unchanged once the transaction has been closed.
"""

from typing import Any, Dict, Optional


class RelicNamerError(Exception):
    """
    Base exception for all Relic Namer errors.

    Attributes:
        message:  Human-readable error description
        context:  Additional debug info for log records
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class TransactionStateError(RelicNamerError):
    """
    Raised when a transaction handle is asked to make an illegal transition.

    What:    e.g. start() after ignore(), or add_parameter() on an ignored handle.
    When:    Only if the orchestrator is wired incorrectly; the middleware
             itself never triggers it.

    Example context:
        {"operation": "start", "state": "ignored", "name": "users.index"}
    """

    def __init__(
        self,
        operation: str,
        state: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"Cannot {operation} a transaction in state '{state}'"
        ctx = context or {}
        ctx["operation"] = operation
        ctx["state"] = state
        super().__init__(message=message, context=ctx)
        self.operation = operation
        self.state = state
