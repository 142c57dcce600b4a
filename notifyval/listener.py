"""
Listeners receive ``(path, value_text)`` pairs from a Registry.

A listener is anything with a ``receive(path, value_text)`` method. The
built-in ``ConsoleListener`` is the default for every new Registry.
"""

import logging
import sys
import threading
from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional, TextIO, Tuple

logger = logging.getLogger(__name__)


class Listener(ABC):
    """Receives value-change notifications."""

    @abstractmethod
    def receive(self, path: str, value_text: str) -> None:
        pass


class ConsoleListener(Listener):
    """Writes ``"<path> updated, new value: <value>"`` lines to a stream."""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        fmt: str = "{path} updated, new value: {value}",
    ) -> None:
        # Resolve sys.stdout lazily so pytest's capsys can swap it
        self._stream = stream
        self.fmt = fmt

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def receive(self, path: str, value_text: str) -> None:
        self.stream.write(self.fmt.format(path=path, value=value_text) + "\n")

    def __repr__(self) -> str:
        return f"ConsoleListener({self.fmt!r})"


class LoggingListener(Listener):
    """Forwards notifications to a ``logging`` logger."""

    def __init__(
        self, log: Optional[logging.Logger] = None, level: int = logging.INFO
    ) -> None:
        self.log = log or logger
        self.level = level

    def receive(self, path: str, value_text: str) -> None:
        self.log.log(self.level, "%s updated, new value: %s", path, value_text)


class RecordingListener(Listener):
    """Keeps every notification in memory, in arrival order."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, str]] = []
        self._lock = threading.Lock()

    def receive(self, path: str, value_text: str) -> None:
        with self._lock:
            self.events.append((path, value_text))

    def paths(self) -> List[str]:
        return [path for path, _ in self.events]

    def last(self) -> Optional[Tuple[str, str]]:
        return self.events[-1] if self.events else None

    def clear(self) -> None:
        with self._lock:
            self.events.clear()

    def __len__(self) -> int:
        return len(self.events)


class CallbackListener(Listener):
    """Adapts a plain ``func(path, value_text)`` callable."""

    def __init__(self, func: Callable[[str, str], None]) -> None:
        self.func = func

    def receive(self, path: str, value_text: str) -> None:
        self.func(path, value_text)


class FanOutListener(Listener):
    """Delivers each notification to several listeners in order."""

    def __init__(self, listeners: Iterable[Listener] = ()) -> None:
        self._listeners: List[Listener] = list(listeners)
        self._lock = threading.RLock()

    def add(self, listener: Listener) -> "FanOutListener":
        with self._lock:
            self._listeners.append(listener)
        return self

    def remove(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    @property
    def listeners(self) -> List[Listener]:
        with self._lock:
            return list(self._listeners)

    def receive(self, path: str, value_text: str) -> None:
        for listener in self.listeners:
            listener.receive(path, value_text)

    def __len__(self) -> int:
        return len(self._listeners)


def as_listener(target) -> Listener:
    """Accept a Listener or a bare callable."""
    if isinstance(target, Listener):
        return target
    if hasattr(target, "receive"):
        return target
    if callable(target):
        return CallbackListener(target)
    raise TypeError(f"{target!r} is not a listener")
