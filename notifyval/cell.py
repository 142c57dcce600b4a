"""
notifyval ScalarCell - Notifying Scalar Values
==============================================

A ``ScalarCell`` wraps a single primitive value. Every assignment stores the
value and emits exactly one notification with its text; reads are free of
side effects.

```python
registry = Registry(listener=ConsoleListener())
i1 = ScalarCell(None, "i1", int, registry=registry)

i1.value = 42            # prints: i1 updated, new value: 42
i1 += 1                  # prints: i1 updated, new value: 43
if i1 == 43:             # comparisons act on the held value
    ...
```

Inbound text updates (``apply_text_update``) are silent, so an external
writer does not receive its own change back as a notification.
"""

import logging
import operator
from typing import Any, Generic, Optional, TypeVar

from .codec import TextCodec, codec_for
from .node import Observable

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ScalarCell(Observable, Generic[T]):
    """
    Observable holding one value of type ``T``.

    Args:
        parent: Enclosing composite or array, or ``None``.
        key: Short name of the cell.
        value_type: A type, numpy dtype name or ``TextCodec`` for the value.
        initial: Initial value; the codec's default (zero) when omitted.
        registry: Registry to report to (see ``Observable``).
    """

    def __init__(
        self,
        parent: Optional[Observable],
        key: str,
        value_type: Any = int,
        initial: Optional[T] = None,
        registry=None,
        register: bool = True,
    ) -> None:
        self._codec: TextCodec = codec_for(value_type)
        self._value: T = (
            self._codec.default if initial is None else self._codec.coerce(initial)
        )
        super().__init__(parent, key, registry=registry, register=register)

    @property
    def codec(self) -> TextCodec:
        return self._codec

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, value: T) -> None:
        self.set(value)

    def get(self) -> T:
        return self._value

    read = get

    def set(self, value: T) -> "ScalarCell[T]":
        """Store ``value`` and notify once."""
        self._value = self._codec.coerce(value)
        self._notify()
        return self

    def assign(self, value: T) -> T:
        self.set(value)
        return self._value

    def format(self) -> str:
        return self._codec.format(self._value)

    def _notify(self) -> None:
        self._registry.dispatch(self, self.format())

    def send_update(self) -> None:
        self._notify()

    def apply_text_update(self, text: str) -> None:
        self._value = self._codec.parse(text)
        logger.debug("Applied text update to '%s': %r", self._key, text)

    # Magic methods for transparent behavior
    def __bool__(self) -> bool:
        return bool(self._value)

    def __int__(self) -> int:
        return int(self._value)

    def __float__(self) -> float:
        return float(self._value)

    def __index__(self) -> int:
        return operator.index(self._value)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"ScalarCell({self._key!r}, {self._value!r})"

    def __eq__(self, other: object) -> bool:
        return self._value == _unwrap(other)

    def __ne__(self, other: object) -> bool:
        return self._value != _unwrap(other)

    def __hash__(self) -> int:
        return id(self)

    def __lt__(self, other: Any) -> bool:
        return self._value < _unwrap(other)

    def __le__(self, other: Any) -> bool:
        return self._value <= _unwrap(other)

    def __gt__(self, other: Any) -> bool:
        return self._value > _unwrap(other)

    def __ge__(self, other: Any) -> bool:
        return self._value >= _unwrap(other)

    def __neg__(self) -> Any:
        return -self._value

    def __pos__(self) -> Any:
        return +self._value

    def __abs__(self) -> Any:
        return abs(self._value)

    def __add__(self, other: Any) -> Any:
        return self._value + _unwrap(other)

    def __radd__(self, other: Any) -> Any:
        return _unwrap(other) + self._value

    def __sub__(self, other: Any) -> Any:
        return self._value - _unwrap(other)

    def __rsub__(self, other: Any) -> Any:
        return _unwrap(other) - self._value

    def __mul__(self, other: Any) -> Any:
        return self._value * _unwrap(other)

    def __rmul__(self, other: Any) -> Any:
        return _unwrap(other) * self._value

    def __truediv__(self, other: Any) -> Any:
        return self._value / _unwrap(other)

    def __floordiv__(self, other: Any) -> Any:
        return self._value // _unwrap(other)

    def __mod__(self, other: Any) -> Any:
        return self._value % _unwrap(other)

    def __pow__(self, other: Any) -> Any:
        return self._value ** _unwrap(other)

    # In-place operators assign, so each one notifies exactly once
    def __iadd__(self, other: Any) -> "ScalarCell[T]":
        return self.set(self._value + _unwrap(other))

    def __isub__(self, other: Any) -> "ScalarCell[T]":
        return self.set(self._value - _unwrap(other))

    def __imul__(self, other: Any) -> "ScalarCell[T]":
        return self.set(self._value * _unwrap(other))

    def __itruediv__(self, other: Any) -> "ScalarCell[T]":
        return self.set(self._value / _unwrap(other))

    def __ifloordiv__(self, other: Any) -> "ScalarCell[T]":
        return self.set(self._value // _unwrap(other))

    def __imod__(self, other: Any) -> "ScalarCell[T]":
        return self.set(self._value % _unwrap(other))


def _unwrap(value: Any) -> Any:
    return value.value if isinstance(value, ScalarCell) else value
