"""
notifyval Codecs - Text Conversion for Observable Values
========================================================

Every value-bearing observable owns a ``TextCodec`` that knows how to turn
its value into text for outbound notifications and how to parse inbound text
back into a value.

Supported out of the box:

- ``int``, ``float``, ``bool`` and ``str``
- ``enum.Enum`` subclasses (formatted by member name, parsed by name or value)
- fixed-width numpy scalar types (``np.uint16``, ``np.int32``, ``np.float32``,
  or the equivalent dtype strings) with range checking on integer kinds

Custom types can be supported by registering a codec:

```python
register_codec(Decimal, MyDecimalCodec())
cell = ScalarCell(None, "price", Decimal)
```

Parse failures always raise ``ParseError``; nothing is silently ignored.
"""

import numbers
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Generic, Optional, Type, TypeVar

import numpy as np

from .errors import ConfigurationError, ParseError

T = TypeVar("T")


class TextCodec(ABC, Generic[T]):
    """Parse/format pair for one value type."""

    #: Type of the values this codec produces
    python_type: Any = object

    @abstractmethod
    def format(self, value: T) -> str:
        """Render a value as notification text."""
        pass

    @abstractmethod
    def parse(self, text: str) -> T:
        """Parse inbound text. Raises ParseError on malformed input."""
        pass

    def coerce(self, value: Any) -> T:
        """Normalize a value assigned from code. Default: store as-is."""
        return value

    @property
    def default(self) -> T:
        """Value a freshly constructed cell holds."""
        return self.python_type()

    @property
    def name(self) -> str:
        return getattr(self.python_type, "__name__", str(self.python_type))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name})"


class IntCodec(TextCodec[int]):
    python_type = int

    def format(self, value: int) -> str:
        return str(int(value))

    def parse(self, text: str) -> int:
        try:
            return int(text.strip(), 10)
        except (TypeError, ValueError) as e:
            raise ParseError(text, int, str(e)) from e

    def coerce(self, value: Any) -> int:
        if isinstance(value, numbers.Integral):
            return int(value)
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise TypeError(f"Cannot assign {value!r} to an int cell")


class FloatCodec(TextCodec[float]):
    """Float codec.

    Args:
        fmt: Optional format spec. ``None`` uses ``str()``; ``"g"`` mimics
            the six-significant-digit output of a C++ stream.
    """

    python_type = float

    def __init__(self, fmt: Optional[str] = None) -> None:
        self.fmt = fmt

    def format(self, value: float) -> str:
        if self.fmt is None:
            return str(float(value))
        return format(float(value), self.fmt)

    def parse(self, text: str) -> float:
        try:
            return float(text.strip())
        except (TypeError, ValueError) as e:
            raise ParseError(text, float, str(e)) from e

    def coerce(self, value: Any) -> float:
        if isinstance(value, numbers.Real):
            return float(value)
        raise TypeError(f"Cannot assign {value!r} to a float cell")


class BoolCodec(TextCodec[bool]):
    python_type = bool

    _TRUE = {"1", "true", "yes", "on"}
    _FALSE = {"0", "false", "no", "off"}

    def format(self, value: bool) -> str:
        return str(bool(value))

    def parse(self, text: str) -> bool:
        token = text.strip().lower()
        if token in self._TRUE:
            return True
        if token in self._FALSE:
            return False
        raise ParseError(text, bool, "expected true/false or 1/0")

    def coerce(self, value: Any) -> bool:
        return bool(value)


class StrCodec(TextCodec[str]):
    python_type = str

    def format(self, value: str) -> str:
        return str(value)

    def parse(self, text: str) -> str:
        return text

    def coerce(self, value: Any) -> str:
        return str(value)


class EnumCodec(TextCodec[Enum]):
    """Enum members render by name and parse from a name or a raw value."""

    def __init__(self, enum_type: Type[Enum]) -> None:
        self.python_type = enum_type

    @property
    def default(self) -> Enum:
        return next(iter(self.python_type))

    def format(self, value: Enum) -> str:
        return self.coerce(value).name

    def parse(self, text: str) -> Enum:
        token = text.strip()
        if token in self.python_type.__members__:
            return self.python_type[token]
        for member in self.python_type:
            if str(member.value) == token:
                return member
        raise ParseError(text, self.python_type, "no such member")

    def coerce(self, value: Any) -> Enum:
        try:
            return self.python_type(value)
        except ValueError:
            raise TypeError(
                f"{value!r} is not a member of {self.python_type.__name__}"
            ) from None


class NumpyCodec(TextCodec[Any]):
    """Codec for fixed-width numpy scalar types such as ``uint16`` or ``float32``."""

    def __init__(self, dtype: Any) -> None:
        self.dtype = np.dtype(dtype)
        if self.dtype.kind not in "iuf":
            raise ConfigurationError(f"Unsupported numpy dtype: {self.dtype}")
        self.python_type = self.dtype.type

    @property
    def name(self) -> str:
        return self.dtype.name

    @property
    def default(self) -> Any:
        return self.dtype.type(0)

    def format(self, value: Any) -> str:
        return str(self.dtype.type(value))

    def parse(self, text: str) -> Any:
        token = text.strip()
        try:
            if self.dtype.kind == "f":
                return self.dtype.type(float(token))
            return self._checked_int(int(token, 10))
        except (TypeError, ValueError, OverflowError) as e:
            raise ParseError(text, self.dtype.name, str(e)) from e

    def coerce(self, value: Any) -> Any:
        if self.dtype.kind == "f":
            return self.dtype.type(value)
        if not isinstance(value, numbers.Integral):
            raise TypeError(f"Cannot assign {value!r} to a {self.dtype.name} cell")
        return self._checked_int(int(value))

    def _checked_int(self, value: int) -> Any:
        info = np.iinfo(self.dtype)
        if not info.min <= value <= info.max:
            raise OverflowError(
                f"{value} out of range for {self.dtype.name} [{info.min}, {info.max}]"
            )
        return self.dtype.type(value)


_CODECS: Dict[Any, TextCodec] = {
    int: IntCodec(),
    float: FloatCodec(),
    bool: BoolCodec(),
    str: StrCodec(),
}


def register_codec(value_type: Any, codec: TextCodec) -> None:
    """Make ``codec`` the codec used for cells declared with ``value_type``."""
    _CODECS[value_type] = codec


def codec_for(value_type: Any) -> TextCodec:
    """
    Resolve a codec from a type, dtype, dtype name or codec instance.

    Raises:
        ConfigurationError: If no codec supports ``value_type``.
    """
    if isinstance(value_type, TextCodec):
        return value_type
    # Exact-type lookup so that bool does not resolve to the int codec
    if value_type in _CODECS:
        return _CODECS[value_type]
    if isinstance(value_type, type) and issubclass(value_type, Enum):
        return EnumCodec(value_type)
    if isinstance(value_type, np.dtype) or (
        isinstance(value_type, type) and issubclass(value_type, np.number)
    ):
        return NumpyCodec(value_type)
    if isinstance(value_type, str):
        try:
            return NumpyCodec(value_type)
        except TypeError:
            pass
    raise ConfigurationError(f"No text codec available for {value_type!r}")
