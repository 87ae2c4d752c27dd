# Middleware package init
"""
Relic Namer — Middleware Package
==================================

What:  The Starlette middleware that names monitoring transactions.

Placement in the chain:
    Request → [TransactionNaming] → [Authentication] → Router → Route Handler

    Downstream middleware and the router write into the same scope dict the
    naming middleware holds, so scope["user"] and scope["route"] are visible
    to it once call_next() returns, wherever authentication sits.
"""

from relic_namer.middleware.transaction_naming import TransactionNamingMiddleware

__all__ = ["TransactionNamingMiddleware"]
