"""
notifyval CompositeNode - Named Groups of Observables
=====================================================

A ``CompositeNode`` groups scalars, arrays and nested composites under one
key and gives them dotted paths (``s1.d1``, ``s1.af1``). It holds no value
itself; each child notifies on its own.

Children are reachable as attributes. Scalars read and assign like plain
fields, arrays and nested composites are returned as nodes:

```python
s1 = CompositeNode(None, "s1", registry=registry)
s1.add_scalar("d1", float, 1.0)
s1.add_array("af1", "float32", 7)

s1.d1 = 5.5            # s1.d1 updated, new value: 5.5
s1.af1[0] = 3.3        # s1.af1.0 updated, new value: 3.3
d = s1.d1              # 5.5, no notification
```
"""

from typing import Any, Dict, Iterator, List, Optional

from .array import ArrayCell
from .cell import ScalarCell
from .config import ArrayMode
from .errors import ConfigurationError, KeyNotFoundError, ParseError
from .node import Observable


class CompositeNode(Observable):
    """Ordered, named collection of child observables."""

    def __init__(
        self, parent: Optional[Observable], key: str, registry=None
    ) -> None:
        object.__setattr__(self, "_children", {})
        super().__init__(parent, key, registry=registry)

    def _attach(self, child: Observable) -> None:
        if hasattr(CompositeNode, child.key):
            raise ConfigurationError(
                f"'{child.key}' is reserved and cannot name a field of '{self._key}'"
            )
        if child.key in self._children:
            raise ConfigurationError(
                f"'{self._key}' already has a child named '{child.key}'"
            )
        self._children[child.key] = child

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def add_scalar(self, key: str, value_type: Any = int, initial: Any = None) -> ScalarCell:
        return ScalarCell(self, key, value_type, initial)

    def add_array(
        self,
        key: str,
        element_type: Any = int,
        size: int = 1,
        mode: Optional[ArrayMode] = None,
        initial=None,
        element_factory=None,
    ) -> ArrayCell:
        return ArrayCell(
            self,
            key,
            element_type,
            size,
            mode=mode,
            initial=initial,
            element_factory=element_factory,
        )

    def add_struct(self, key: str) -> "CompositeNode":
        return CompositeNode(self, key)

    # ------------------------------------------------------------------
    # Children
    # ------------------------------------------------------------------

    def child(self, key: str) -> Observable:
        try:
            return self._children[key]
        except KeyError:
            sep = self._registry.settings.path_separator
            raise KeyNotFoundError(f"{self.path}{sep}{key}") from None

    def children(self) -> List[Observable]:
        return list(self._children.values())

    def keys(self) -> List[str]:
        return list(self._children)

    def __contains__(self, key: object) -> bool:
        return key in self._children

    def __iter__(self) -> Iterator[Observable]:
        return iter(self.children())

    def __len__(self) -> int:
        return len(self._children)

    def __bool__(self) -> bool:
        return True

    def leaves(self) -> List[Observable]:
        """Descendants that carry a value of their own, depth first."""
        found = []
        for child in self._children.values():
            if isinstance(child, CompositeNode):
                found.extend(child.leaves())
            elif isinstance(child, ArrayCell) and child.mode is ArrayMode.PER_ELEMENT:
                for element in child.elements:
                    if isinstance(element, CompositeNode):
                        found.extend(element.leaves())
                    else:
                        found.append(element)
            else:
                found.append(child)
        return found

    def to_dict(self) -> Dict[str, Any]:
        """Current values as nested dicts and lists."""
        result = {}
        for key, child in self._children.items():
            result[key] = _plain(child)
        return result

    def notify_all(self) -> None:
        """Send the current value of every leaf below this node."""
        self._registry.notify_subtree(self)

    # ------------------------------------------------------------------
    # Transparent field access
    # ------------------------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails
        children = self.__dict__.get("_children", {})
        if name in children:
            child = children[name]
            return child.value if isinstance(child, ScalarCell) else child
        raise AttributeError(
            f"'{type(self).__name__}' node '{self.__dict__.get('_key')}' has no field '{name}'"
        )

    def __setattr__(self, name: str, value: Any) -> None:
        children = self.__dict__.get("_children", {})
        if name in children and not name.startswith("_"):
            child = children[name]
            if isinstance(child, ScalarCell):
                child.set(value)
                return
            if isinstance(child, ArrayCell):
                child.set_values(value)
                return
            raise AttributeError(f"Cannot assign to composite field '{name}'")
        object.__setattr__(self, name, value)

    # ------------------------------------------------------------------
    # Observable
    # ------------------------------------------------------------------

    def send_update(self) -> None:
        # Children notify for themselves
        pass

    def apply_text_update(self, text: str) -> None:
        raise ParseError(
            text, type(self), "structured updates of a whole composite are not supported"
        )

    def __str__(self) -> str:
        return f"<Struct {self._key} updated>"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._key!r}, {self.keys()!r})"


def _plain(node: Observable) -> Any:
    if isinstance(node, ScalarCell):
        return node.value
    if isinstance(node, ArrayCell):
        return [_plain(e) for e in node.elements]
    if isinstance(node, CompositeNode):
        return node.to_dict()
    return None
