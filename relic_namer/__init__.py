"""
Relic Namer — Package Initializer
===================================

What: Names New Relic transactions for Starlette/FastAPI requests.

Architecture Note:

    ┌─────────────────────────────────────┐
    │   TransactionNamingMiddleware       │  ← request lifecycle, try/finally
    ├─────────────────────────────────────┤
    │   TransactionNamer                  │  ← naming chain, ignore rules
    │   routing / principal               │  ← route + user introspection
    ├─────────────────────────────────────┤
    │   TransactionHandle                 │  ← lifecycle state machine
    ├─────────────────────────────────────┤
    │   TransactionRecorder               │  ← New Relic / null / in-memory
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
