"""
Abstract base for everything that can be observed.

An observable knows its own short key, its parent (if nested) and the
Registry it reports to. Subclasses decide what ``send_update`` emits and
how ``apply_text_update`` interprets inbound text.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from .errors import ConfigurationError

if TYPE_CHECKING:
    from .registry import Registry


def _resolve_registry(parent, registry) -> "Registry":
    if parent is not None:
        if registry is not None and registry is not parent.registry:
            raise ConfigurationError(
                f"'{parent.key}' belongs to a different registry than its child"
            )
        return parent.registry
    if registry is not None:
        return registry

    from .registry import get_default_registry

    return get_default_registry()


class Observable(ABC):
    """
    Base class for scalar cells, arrays and composite nodes.

    Args:
        parent: Enclosing composite or array, or ``None`` for a root.
        key: Short name, unique among its siblings.
        registry: Registry to report to. Inherited from ``parent`` when
            nested; defaults to the process-wide registry for roots.
        register: Whether to record the observable in the registry. Elements
            of whole-array arrays are not registered individually.
    """

    def __init__(
        self,
        parent: Optional["Observable"],
        key: str,
        registry: Optional["Registry"] = None,
        register: bool = True,
    ) -> None:
        registry = _resolve_registry(parent, registry)
        if not isinstance(key, str) or not key:
            raise ConfigurationError(f"Observable key must be a non-empty string, got {key!r}")
        if registry.settings.path_separator in key:
            raise ConfigurationError(
                f"Key {key!r} must not contain the path separator "
                f"{registry.settings.path_separator!r}"
            )

        self._key = key
        self._parent = parent
        self._registry = registry
        self._handle: Optional[int] = None

        if parent is not None:
            parent._attach(self)
        if register:
            self._handle = registry.register(self)

    @property
    def key(self) -> str:
        return self._key

    @property
    def parent(self) -> Optional["Observable"]:
        return self._parent

    @property
    def registry(self) -> "Registry":
        return self._registry

    @property
    def handle(self) -> Optional[int]:
        """Arena handle, or ``None`` for unregistered elements."""
        return self._handle

    @property
    def path(self) -> str:
        """Dotted path from the outermost ancestor to this observable."""
        if self._handle is not None:
            return self._registry.path_of(self)
        if self._parent is None:
            return self._key
        return self._parent.path + self._registry.settings.path_separator + self._key

    def _attach(self, child: "Observable") -> None:
        """Hook called when a child is constructed with this node as parent."""
        raise ConfigurationError(f"'{self._key}' cannot hold child observables")

    @abstractmethod
    def send_update(self) -> None:
        """Emit the current value to the registry, if this node carries one."""
        pass

    @abstractmethod
    def apply_text_update(self, text: str) -> None:
        """Store a value parsed from ``text`` without notifying.

        Raises:
            ParseError: If ``text`` cannot be converted; the value is unchanged.
        """
        pass
