"""
Relic Namer — Transaction Recorders
=====================================

What:  Facades over the monitoring agent, selected at startup.

Recorder Inventory:
    - TransactionRecorder (abstract): contract used by TransactionHandle
    - NewRelicRecorder: New Relic Python agent adapter
    - NullRecorder: monitoring disabled
    - InMemoryRecorder: records calls for assertions
"""

from relic_namer.recorders.base import TransactionRecorder
from relic_namer.recorders.memory import InMemoryRecorder
from relic_namer.recorders.newrelic_recorder import NewRelicRecorder
from relic_namer.recorders.null import NullRecorder

__all__ = [
    "TransactionRecorder",
    "NewRelicRecorder",
    "NullRecorder",
    "InMemoryRecorder",
]
