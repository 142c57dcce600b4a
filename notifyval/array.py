"""
notifyval ArrayCell - Fixed-Size Notifying Arrays
=================================================

An ``ArrayCell`` owns exactly ``size`` elements keyed ``"0"`` … ``"size-1"``.
How element changes are reported is a property of the array, fixed when it
is constructed:

**ArrayMode.PER_ELEMENT**: every element is registered on its own and
notifies under its own path::

    a2.1 updated, new value: 6

**ArrayMode.WHOLE_ARRAY**: only the array is registered. Assigning any
element emits the whole array under the array's path, space separated with
a trailing space before the closing bracket::

    a2 updated, new value: [0 6 0 0 ]

Arrays of composites are built with ``element_factory`` and are always
per-element.

Inbound text is either a delimited token list (``"1,2,3"``) or the
bracketed form the array emits (``"[1 2 3 ]"``). Tokens are matched to
elements by position; extra tokens are ignored and missing ones leave the
remaining elements untouched.
"""

import logging
import operator
from typing import Any, Callable, Iterable, Iterator, List, Optional, Tuple

from .cell import ScalarCell
from .config import ArrayMode
from .errors import (
    ConfigurationError,
    IndexOutOfRangeError,
    KeyNotFoundError,
    ParseError,
)
from .node import Observable

logger = logging.getLogger(__name__)


class ArrayElement(ScalarCell):
    """Unregistered element of a whole-array array; its parent notifies."""

    def __init__(self, parent: "ArrayCell", key: str, value_type: Any, initial=None):
        super().__init__(parent, key, value_type, initial, register=False)

    def _notify(self) -> None:
        self._parent.send_update()

    def send_update(self) -> None:
        # The array reports on behalf of its elements
        pass

    def __repr__(self) -> str:
        return f"ArrayElement({self.path!r}, {self._value!r})"


class ArrayCell(Observable):
    """
    Fixed-size array of observable elements.

    Args:
        parent: Enclosing composite, or ``None``.
        key: Short name of the array.
        element_type: Type, dtype name or codec for scalar elements.
        size: Number of elements; never changes afterwards.
        mode: Notification model; defaults to the registry settings.
        initial: Optional initial values, at most ``size`` of them.
        element_factory: ``factory(array, key)`` building composite elements
            instead of scalars.
        registry: Registry to report to (see ``Observable``).
    """

    def __init__(
        self,
        parent: Optional[Observable],
        key: str,
        element_type: Any = int,
        size: int = 1,
        mode: Optional[ArrayMode] = None,
        initial: Optional[Iterable[Any]] = None,
        element_factory: Optional[Callable[["ArrayCell", str], Observable]] = None,
        registry=None,
    ) -> None:
        if not isinstance(size, int) or isinstance(size, bool) or size < 1:
            raise ConfigurationError(f"Array '{key}' needs a positive size, got {size!r}")

        super().__init__(parent, key, registry=registry)

        self._size = size
        self._mode = ArrayMode.parse(
            mode if mode is not None else self._registry.settings.default_array_mode
        )
        if element_factory is not None and self._mode is ArrayMode.WHOLE_ARRAY:
            raise ConfigurationError(
                f"Array '{key}': composite elements require per-element mode"
            )

        initial_values = list(initial) if initial is not None else []
        if len(initial_values) > size:
            raise ConfigurationError(
                f"Array '{key}' of size {size} got {len(initial_values)} initial values"
            )
        initial_values += [None] * (size - len(initial_values))

        self._elements: List[Observable] = []
        self._building = True
        try:
            for index, start in enumerate(initial_values):
                element_key = str(index)
                if element_factory is not None:
                    element = element_factory(self, element_key)
                elif self._mode is ArrayMode.WHOLE_ARRAY:
                    element = ArrayElement(self, element_key, element_type, start)
                else:
                    element = ScalarCell(self, element_key, element_type, start)
                if element.parent is not self or element.key != element_key:
                    raise ConfigurationError(
                        f"Element factory for '{key}' must build children of the array "
                        f"keyed by their index"
                    )
        finally:
            self._building = False

    def _attach(self, child: Observable) -> None:
        if not self._building:
            raise ConfigurationError(f"Array '{self._key}' has a fixed size of {self._size}")
        self._elements.append(child)

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------

    @property
    def mode(self) -> ArrayMode:
        return self._mode

    @property
    def size(self) -> int:
        return self._size

    @property
    def elements(self) -> Tuple[Observable, ...]:
        return tuple(self._elements)

    def _index(self, index: Any) -> int:
        try:
            i = operator.index(index)
        except TypeError:
            raise IndexOutOfRangeError(self._key, index, self._size) from None
        if not 0 <= i < self._size:
            raise IndexOutOfRangeError(self._key, index, self._size)
        return i

    def element(self, index: int) -> Observable:
        """Element node at ``index``. Raises ``IndexOutOfRangeError``."""
        return self._elements[self._index(index)]

    def child(self, key: str) -> Observable:
        """Element addressed by its string key (``"0"``, ``"1"`` …)."""
        try:
            return self.element(int(key))
        except (ValueError, IndexOutOfRangeError):
            sep = self._registry.settings.path_separator
            raise KeyNotFoundError(f"{self.path}{sep}{key}") from None

    def __getitem__(self, index: Any) -> Any:
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(self._size))]
        element = self.element(index)
        return element.value if isinstance(element, ScalarCell) else element

    def __setitem__(self, index: Any, value: Any) -> None:
        element = self.element(index)
        if not isinstance(element, ScalarCell):
            raise TypeError(
                f"Element {index} of '{self._key}' is a composite; assign its fields"
            )
        element.set(value)

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Any]:
        for i in range(self._size):
            yield self[i]

    def values(self) -> List[Any]:
        return list(self)

    def set_values(self, values: Iterable[Any]) -> None:
        """
        Assign elements from ``values`` by position.

        Whole-array arrays emit one notification for the batch; per-element
        arrays notify once per assigned element.
        """
        values = list(values)
        if len(values) > self._size:
            raise IndexOutOfRangeError(self._key, len(values) - 1, self._size)

        # Coerce everything first so a rejected value leaves the array as it was
        coerced = []
        for index, (element, value) in enumerate(zip(self._elements, values)):
            if not isinstance(element, ScalarCell):
                raise TypeError(
                    f"Element {index} of '{self._key}' is a composite; assign its fields"
                )
            coerced.append((element, element.codec.coerce(value)))

        if self._mode is ArrayMode.WHOLE_ARRAY:
            for element, value in coerced:
                element._value = value
            self.send_update()
        else:
            for element, value in coerced:
                element.set(value)

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def format(self) -> str:
        """Bracketed, space-separated element text: ``[v0 v1 … ]``."""
        parts = []
        for element in self._elements:
            if isinstance(element, ScalarCell):
                parts.append(element.format() + " ")
            else:
                parts.append(str(element) + " ")
        return "[" + "".join(parts) + "]"

    def send_update(self) -> None:
        if self._mode is ArrayMode.WHOLE_ARRAY:
            self._registry.dispatch(self, self.format())

    def tokenize(self, text: str) -> List[str]:
        stripped = text.strip()
        if not stripped:
            return []
        if stripped.startswith("[") and stripped.endswith("]"):
            return stripped[1:-1].split()
        tokens = [t.strip() for t in stripped.split(self._registry.settings.array_delimiter)]
        # A trailing delimiter ends the list rather than adding an empty token
        if tokens and not tokens[-1]:
            tokens.pop()
        return tokens

    def apply_text_update(self, text: str) -> None:
        """
        Store element values parsed from ``text`` without notifying.

        Every token is parsed before anything is stored, so a malformed token
        leaves the whole array unchanged.
        """
        tokens = self.tokenize(text)[: self._size]
        parsed = []
        for element, token in zip(self._elements, tokens):
            if not isinstance(element, ScalarCell):
                raise ParseError(
                    token, type(element), "composite elements cannot be parsed from text"
                )
            parsed.append((element, element.codec.parse(token)))

        for element, value in parsed:
            element._value = value
        logger.debug("Applied %d tokens to array '%s'", len(parsed), self._key)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"ArrayCell({self._key!r}, {self._mode.name}, {self.values()!r})"
