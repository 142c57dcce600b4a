"""
notifyval Struct - Declarative Notifying Structures
===================================================

``Struct`` lets a structure of notifying fields be declared the way a plain
record would be, with the attribute name doubling as the field key:

```python
class S1(Struct):
    i1 = scalar_field(int)
    d1 = scalar_field(float, 1.0)
    af1 = array_field("float32", 7)

class Values(Struct):
    i1 = scalar_field("uint16")
    f1 = scalar_field("float32")
    a2 = array_field("uint32", 4, mode=ArrayMode.WHOLE_ARRAY)
    s1 = struct_field(S1)

values = Values(registry=registry)
values.i1 = 42          # i1 updated, new value: 42
values.a2[1] = 6        # a2 updated, new value: [0 6 0 0 ]
values.s1.d1 = 5.5      # s1.d1 updated, new value: 5.5
i = values.i1           # plain read, no notification
```

A ``Struct`` built without a key is a namespace: its fields become root
observables (``i1`` rather than ``values.i1``). Built with a key, or nested
through ``struct_field``, it is a composite node and prefixes the paths of
its fields.

Keys default to the attribute name; pass ``key=`` to use a different one.
Fields declared on base classes are inherited and built first.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple, Type

from .array import ArrayCell
from .cell import ScalarCell
from .config import ArrayMode
from .errors import KeyNotFoundError
from .node import Observable, _resolve_registry
from .struct import CompositeNode


class FieldSpec(ABC):
    """Descriptor declaring one field of a ``Struct``."""

    def __init__(self, key: Optional[str] = None) -> None:
        self.key = key
        self.attr_name: Optional[str] = None

    def __set_name__(self, owner: Type, name: str) -> None:
        self.attr_name = name
        if self.key is None:
            self.key = name

    @abstractmethod
    def build(self, parent: Optional[Observable], registry) -> Observable:
        """Construct the observable for this field under ``parent``."""
        pass

    def __get__(self, instance: Optional["Struct"], owner: Optional[Type]) -> Any:
        if instance is None:
            return self
        node = instance.child(self.key)
        return node.value if isinstance(node, ScalarCell) else node

    def __set__(self, instance: "Struct", value: Any) -> None:
        node = instance.child(self.key)
        if isinstance(node, ScalarCell):
            node.set(value)
        elif isinstance(node, ArrayCell):
            node.set_values(value)
        else:
            raise AttributeError(f"Cannot assign to composite field '{self.attr_name}'")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.key!r})"


class ScalarField(FieldSpec):
    def __init__(self, value_type: Any = int, default: Any = None, key: Optional[str] = None):
        super().__init__(key)
        self.value_type = value_type
        self.default = default

    def build(self, parent, registry) -> ScalarCell:
        return ScalarCell(parent, self.key, self.value_type, self.default, registry=registry)


class ArrayField(FieldSpec):
    def __init__(
        self,
        element_type: Any = int,
        size: int = 1,
        mode: Optional[ArrayMode] = None,
        initial=None,
        element_factory=None,
        key: Optional[str] = None,
    ):
        super().__init__(key)
        self.element_type = element_type
        self.size = size
        self.mode = mode
        self.initial = initial
        self.element_factory = element_factory

    def build(self, parent, registry) -> ArrayCell:
        return ArrayCell(
            parent,
            self.key,
            self.element_type,
            self.size,
            mode=self.mode,
            initial=self.initial,
            element_factory=self.element_factory,
            registry=registry,
        )


class StructField(FieldSpec):
    def __init__(self, struct_type: Type["Struct"], key: Optional[str] = None):
        super().__init__(key)
        self.struct_type = struct_type

    def build(self, parent, registry) -> "Struct":
        return self.struct_type(parent, self.key, registry=registry)


def scalar_field(value_type: Any = int, default: Any = None, key: Optional[str] = None) -> Any:
    """Declare a notifying scalar field."""
    return ScalarField(value_type, default, key)


def array_field(
    element_type: Any = int,
    size: int = 1,
    mode: Optional[ArrayMode] = None,
    initial=None,
    key: Optional[str] = None,
) -> Any:
    """Declare a fixed-size notifying array field."""
    return ArrayField(element_type, size, mode, initial, key=key)


def struct_field(struct_type: Type["Struct"], key: Optional[str] = None) -> Any:
    """Declare a nested structure field."""
    return StructField(struct_type, key)


def struct_array_field(
    struct_type: Type["Struct"], size: int, key: Optional[str] = None
) -> Any:
    """Declare a per-element array whose elements are ``struct_type`` instances."""

    def factory(array: ArrayCell, element_key: str) -> "Struct":
        return struct_type(array, element_key)

    return ArrayField(
        None, size, ArrayMode.PER_ELEMENT, element_factory=factory, key=key
    )


class StructMeta(type(CompositeNode)):
    """Collects ``FieldSpec`` declarations in definition order, bases first."""

    def __new__(mcs, name: str, bases: tuple, namespace: dict) -> Type:
        cls = super().__new__(mcs, name, bases, namespace)

        fields: Dict[str, FieldSpec] = {}
        for base in reversed(cls.__mro__[1:]):
            for attr_name, field in getattr(base, "_declared_fields", ()):
                fields[attr_name] = field
        for attr_name, value in namespace.items():
            if isinstance(value, FieldSpec):
                fields.pop(attr_name, None)
                fields[attr_name] = value

        cls._declared_fields = tuple(fields.items())
        return cls


class Struct(CompositeNode, metaclass=StructMeta):
    """
    Base class for declared structures of notifying fields.

    Args:
        parent: Enclosing composite or array when nested.
        key: Key of this node. ``None`` (for a root) builds a namespace whose
            fields are root observables.
        registry: Registry to report to.
    """

    _declared_fields: Tuple[Tuple[str, FieldSpec], ...] = ()

    def __init__(
        self,
        parent: Optional[Observable] = None,
        key: Optional[str] = None,
        registry=None,
    ) -> None:
        if key is None and parent is None:
            # Namespace: not an observable of its own
            object.__setattr__(self, "_children", {})
            self._key = None
            self._parent = None
            self._registry = _resolve_registry(None, registry)
            self._handle = None
            for _, field in self._declared_fields:
                node = field.build(None, self._registry)
                self._attach(node)
        else:
            super().__init__(parent, key, registry=registry)
            for _, field in self._declared_fields:
                field.build(self, self._registry)

    @classmethod
    def fields(cls) -> List[str]:
        """Declared field keys in build order."""
        return [field.key for _, field in cls._declared_fields]

    @property
    def is_namespace(self) -> bool:
        return self._key is None

    @property
    def path(self) -> str:
        if self.is_namespace:
            return ""
        return super().path

    def child(self, key: str) -> Observable:
        if self.is_namespace and key not in self._children:
            raise KeyNotFoundError(key)
        return super().child(key)

    def notify_all(self) -> None:
        if not self.is_namespace:
            super().notify_all()
            return
        for node in self._children.values():
            self._registry.notify_subtree(node)

    def __str__(self) -> str:
        if self.is_namespace:
            return f"<Struct {type(self).__name__} updated>"
        return super().__str__()
