"""No-op recorder used when monitoring is switched off."""

from typing import Any, Optional

from relic_namer.recorders.base import TransactionRecorder


class NullRecorder(TransactionRecorder):
    def enabled(self) -> bool:
        return False

    def set_name(self, name: str) -> None:
        pass

    def add_parameter(self, key: str, value: Optional[Any]) -> None:
        pass

    def ignore(self) -> None:
        pass

    def start(self, name: str, capture_params: bool = False) -> None:
        pass

    def end(self, error: Optional[BaseException] = None) -> None:
        pass
