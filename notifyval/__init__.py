"""
notifyval - Notifying Values for Legacy-Style State
===================================================

Scalar, array and nested-structure fields that report every change to a
central Registry, which forwards ``(path, text)`` pairs to listeners and
applies external text updates addressed by dotted path.
"""

__version__ = "0.1.0"

from .array import ArrayCell, ArrayElement
from .arena import ObservableArena
from .cell import ScalarCell
from .codec import (
    BoolCodec,
    EnumCodec,
    FloatCodec,
    IntCodec,
    NumpyCodec,
    StrCodec,
    TextCodec,
    codec_for,
    register_codec,
)
from .config import ArrayMode, Settings, configure_logging
from .errors import (
    ConfigurationError,
    IndexOutOfRangeError,
    KeyNotFoundError,
    NotifyValError,
    ParseError,
)
from .listener import (
    CallbackListener,
    ConsoleListener,
    FanOutListener,
    Listener,
    LoggingListener,
    RecordingListener,
)
from .node import Observable
from .registry import (
    Registry,
    _reset_default_registry,
    get_default_registry,
    set_default_registry,
)
from .schema import (
    Struct,
    array_field,
    scalar_field,
    struct_array_field,
    struct_field,
)
from .struct import CompositeNode

__all__ = [
    # Observables
    "Observable",
    "ScalarCell",
    "ArrayCell",
    "ArrayElement",
    "ArrayMode",
    "CompositeNode",
    # Declarative structures
    "Struct",
    "scalar_field",
    "array_field",
    "struct_field",
    "struct_array_field",
    # Registry
    "Registry",
    "ObservableArena",
    "get_default_registry",
    "set_default_registry",
    # Listeners
    "Listener",
    "ConsoleListener",
    "LoggingListener",
    "RecordingListener",
    "CallbackListener",
    "FanOutListener",
    # Codecs
    "TextCodec",
    "IntCodec",
    "FloatCodec",
    "BoolCodec",
    "StrCodec",
    "EnumCodec",
    "NumpyCodec",
    "codec_for",
    "register_codec",
    # Configuration
    "Settings",
    "configure_logging",
    # Exceptions
    "NotifyValError",
    "ParseError",
    "KeyNotFoundError",
    "IndexOutOfRangeError",
    "ConfigurationError",
    # Testing utilities (internal use)
    "_reset_default_registry",
]
