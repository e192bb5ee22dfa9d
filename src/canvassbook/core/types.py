"""Type aliases used across canvassbook."""

from __future__ import annotations

from datetime import datetime
from typing import Callable

WeekId = str
MonthId = str
Clock = Callable[[], datetime]
Listener = Callable[[], None]
Unsubscribe = Callable[[], None]
