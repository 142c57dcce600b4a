"""
Exceptions raised by notifyval.

All of them are local and recoverable: nothing in this package treats an
error as fatal to the process.
"""

from typing import Any, Optional


class NotifyValError(Exception):
    """Base class for all notifyval errors."""

    pass


class ParseError(NotifyValError, ValueError):
    """Raised when inbound text cannot be converted to the target type.

    The target observable keeps its previous value.
    """

    def __init__(
        self, text: str, target: Any = None, reason: Optional[str] = None
    ) -> None:
        self.text = text
        self.target = target
        self.reason = reason
        message = f"Cannot parse {text!r}"
        if target is not None:
            message += f" as {getattr(target, '__name__', target)}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class KeyNotFoundError(NotifyValError, KeyError):
    """Raised by strict lookups when no observable matches a path."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(path)

    def __str__(self) -> str:
        return f"No observable registered under {self.path!r}"


class IndexOutOfRangeError(NotifyValError, IndexError):
    """Raised when an array element is accessed outside its fixed bounds."""

    def __init__(self, key: str, index: Any, size: int) -> None:
        self.key = key
        self.index = index
        self.size = size
        super().__init__(
            f"Index {index!r} out of range for array '{key}' of size {size}"
        )


class ConfigurationError(NotifyValError):
    """Raised when an observable tree is declared inconsistently."""

    pass
