"""
notifyval Arena - Handle-Indexed Observable Records
===================================================

Every observable registered with a ``Registry`` gets a record in an
``ObservableArena``. Records are addressed by stable integer handles, and
the parent relation is stored as a parent handle, so path assembly walks
integers instead of object back-references.

Layout:
- Parallel arrays for keys, parent handles and the observable objects
- ``-1`` marks a root (no parent) in the parent array
- Append-only: records live as long as the arena, handles are never reused
"""

import array
from typing import Any, Iterator, List, Optional

NO_PARENT = -1


class ObservableArena:
    """
    Append-only arena of observable records.

    A parent must be allocated before its children, so parent handles are
    always smaller than child handles and the parent graph is acyclic.
    """

    def __init__(self, initial_capacity: int = 64):
        """
        Initialize arena storage.

        Args:
            initial_capacity: Number of parent slots reserved up front; the
                arena grows past it by doubling.
        """
        self.capacity = initial_capacity
        self.count = 0

        # Metadata arrays (parallel, indexed by handle)
        self.keys: List[str] = []
        self.nodes: List[Any] = []
        self.parents = array.array("l", [NO_PARENT] * initial_capacity)

    def allocate(self, key: str, parent: Optional[int], node: Any) -> int:
        """
        Allocate a record and return its handle.

        Raises:
            ValueError: If ``parent`` is not an already allocated handle.
        """
        if parent is not None and not 0 <= parent < self.count:
            raise ValueError(f"Unknown parent handle {parent} for '{key}'")

        if self.count >= self.capacity:
            self._grow()

        handle = self.count
        self.keys.append(key)
        self.nodes.append(node)
        self.parents[handle] = NO_PARENT if parent is None else parent
        self.count += 1
        return handle

    def _grow(self) -> None:
        new_capacity = max(1, self.capacity * 2)
        self.parents.extend([NO_PARENT] * (new_capacity - self.capacity))
        self.capacity = new_capacity

    def key_of(self, handle: int) -> str:
        self._check(handle)
        return self.keys[handle]

    def node_of(self, handle: int) -> Any:
        self._check(handle)
        return self.nodes[handle]

    def parent_of(self, handle: int) -> Optional[int]:
        self._check(handle)
        parent = self.parents[handle]
        return None if parent == NO_PARENT else parent

    def lineage(self, handle: int) -> List[int]:
        """Handles from the outermost ancestor down to ``handle`` itself."""
        chain = []
        current: Optional[int] = handle
        while current is not None:
            chain.append(current)
            current = self.parent_of(current)
        chain.reverse()
        return chain

    def path_of(self, handle: int, separator: str = ".") -> str:
        """Join the keys along the lineage of ``handle``."""
        return separator.join(self.keys[h] for h in self.lineage(handle))

    def children_of(self, handle: int) -> List[int]:
        """Direct children of ``handle`` in allocation order."""
        self._check(handle)
        # Children are always allocated after their parent
        return [
            h for h in range(handle + 1, self.count) if self.parents[h] == handle
        ]

    def descendants_of(self, handle: int) -> List[int]:
        """All handles below ``handle`` in allocation order."""
        self._check(handle)
        inside = {handle}
        found = []
        for h in range(handle + 1, self.count):
            if self.parents[h] in inside:
                inside.add(h)
                found.append(h)
        return found

    def _check(self, handle: int) -> None:
        if not 0 <= handle < self.count:
            raise IndexError(f"Invalid arena handle {handle}")

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.count))
