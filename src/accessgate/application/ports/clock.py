"""Clock port."""

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Source of the current (timezone-aware) time."""

    def now(self) -> datetime: ...
