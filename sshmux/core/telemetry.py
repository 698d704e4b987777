"""
Telemetry for dial attempts
"""
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional


@dataclass
class Metric:
    """Single metric value"""
    name: str
    value: float
    timestamp: float = field(default_factory=time.time)
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class Event:
    """Event record"""
    name: str
    timestamp: float = field(default_factory=time.time)
    metadata: Dict[str, Any] = field(default_factory=dict)


class Telemetry:
    """
    In-process collector for dial metrics and events.

    Dials may run on several threads at once, so recording is locked.
    """

    def __init__(self):
        self._metrics: List[Metric] = []
        self._events: List[Event] = []
        self._lock = threading.Lock()

    def record_metric(self, name: str, value: float, tags: Optional[Dict[str, str]] = None) -> None:
        with self._lock:
            self._metrics.append(Metric(name=name, value=value, tags=tags or {}))

    def record_event(self, name: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        with self._lock:
            self._events.append(Event(name=name, metadata=metadata or {}))

    @contextmanager
    def timed(self, name: str, tags: Optional[Dict[str, str]] = None) -> Iterator[None]:
        """Record the wall time of the enclosed block as a metric, even on error"""
        start = time.monotonic()
        try:
            yield
        finally:
            self.record_metric(name, time.monotonic() - start, tags)

    def get_metrics(self, name: Optional[str] = None) -> List[Metric]:
        with self._lock:
            return [m for m in self._metrics if name is None or m.name == name]

    def get_events(self, name: Optional[str] = None) -> List[Event]:
        with self._lock:
            return [e for e in self._events if name is None or e.name == name]

    def clear(self) -> None:
        with self._lock:
            self._metrics.clear()
            self._events.clear()


# Global telemetry instance
_telemetry = Telemetry()


def get_telemetry() -> Telemetry:
    """Get global telemetry instance"""
    return _telemetry
