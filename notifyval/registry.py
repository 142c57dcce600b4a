"""
notifyval Registry - Central Notification Dispatcher
====================================================

The ``Registry`` records every observable constructed against it, routes
outbound notifications to the active listener and resolves inbound text
updates to the observable they address.

Outbound:
    assignment -> cell formats its value -> ``dispatch`` assembles the dotted
    path from the parent chain -> ``listener.receive(path, text)``

Inbound:
    ``update(path, text)`` -> linear scan for the path -> ``apply_text_update``

Registries are ordinary objects: pass one to each root observable (children
inherit it from their parent). Call sites that do not pass a registry share
the process-wide default returned by ``get_default_registry()``.

```python
registry = Registry(listener=RecordingListener())
i1 = ScalarCell(None, "i1", int, registry=registry)
i1.value = 42
registry.listener.events        # [("i1", "42")]
registry.update("i1", "45")     # True, silent
```
"""

import logging
import threading
from typing import Any, Iterator, List, Optional, Union

from cachetools import LRUCache

from .arena import ObservableArena
from .config import Settings
from .errors import KeyNotFoundError, ParseError
from .listener import ConsoleListener, FanOutListener, Listener, as_listener

logger = logging.getLogger(__name__)

PATH_CACHE_SIZE = 4096


class Registry:
    """
    Holds every registered observable and the active listener.

    The registration list is append-only: observables are never removed and
    stay registered for the lifetime of the registry.
    """

    def __init__(
        self,
        listener: Optional[Listener] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or Settings()

        self._arena = ObservableArena()
        self._lock = threading.RLock()
        self._listener: Listener = (
            as_listener(listener)
            if listener is not None
            else ConsoleListener(fmt=self.settings.console_format)
        )
        # Parents never change, so a path computed once stays valid
        self._path_cache: LRUCache = LRUCache(maxsize=PATH_CACHE_SIZE)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, observable: Any) -> int:
        """Append ``observable`` and return its arena handle."""
        parent = observable.parent
        parent_handle = parent.handle if parent is not None else None
        with self._lock:
            handle = self._arena.allocate(observable.key, parent_handle, observable)
        logger.debug("Registered '%s' as handle %d", observable.key, handle)
        return handle

    def observables(self) -> List[Any]:
        """Snapshot of registered observables in registration order."""
        with self._lock:
            return list(self._arena.nodes)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.observables())

    def __len__(self) -> int:
        return len(self._arena)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.find(path) is not None

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def path_of(self, observable: Any) -> str:
        """Dotted path of a registered observable, outermost ancestor first."""
        handle = observable.handle
        if handle is None:
            return observable.path
        path = self._path_cache.get(handle)
        if path is None:
            path = self._arena.path_of(handle, self.settings.path_separator)
            self._path_cache[handle] = path
        return path

    def paths(self) -> List[str]:
        return [self.path_of(o) for o in self.observables()]

    def descendants(self, observable: Any) -> List[Any]:
        """Registered observables below ``observable``, in registration order."""
        if observable.handle is None:
            return []
        with self._lock:
            handles = self._arena.descendants_of(observable.handle)
            return [self._arena.nodes[h] for h in handles]

    # ------------------------------------------------------------------
    # Outbound notifications
    # ------------------------------------------------------------------

    @property
    def listener(self) -> Listener:
        return self._listener

    def set_listener(self, listener: Union[Listener, Any]) -> Listener:
        """Replace the active listener and return the previous one."""
        with self._lock:
            previous = self._listener
            self._listener = as_listener(listener)
        return previous

    def add_listener(self, listener: Union[Listener, Any]) -> None:
        """Deliver notifications to ``listener`` in addition to the current ones."""
        listener = as_listener(listener)
        with self._lock:
            if isinstance(self._listener, FanOutListener):
                self._listener.add(listener)
            else:
                self._listener = FanOutListener([self._listener, listener])

    def remove_listener(self, listener: Listener) -> None:
        """
        Stop delivering to a listener previously added with ``add_listener``.

        Raises:
            ValueError: If ``listener`` is not receiving notifications.
        """
        with self._lock:
            current = self._listener
            if isinstance(current, FanOutListener) and listener in current.listeners:
                current.remove(listener)
                return
        raise ValueError(f"{listener!r} is not an active listener of this registry")

    def dispatch(self, observable: Any, value_text: str) -> None:
        """Forward ``(path, value_text)`` for ``observable`` to the listener."""
        path = self.path_of(observable)
        with self._lock:
            listener = self._listener
        logger.debug("Dispatching %s = %s", path, value_text)
        listener.receive(path, value_text)

    def notify_all(self) -> None:
        """Ask every registered observable to send its current value."""
        for observable in self.observables():
            observable.send_update()

    def notify_subtree(self, root: Any) -> None:
        """Like ``notify_all`` but limited to ``root`` and its descendants."""
        root.send_update()
        for observable in self.descendants(root):
            observable.send_update()

    # ------------------------------------------------------------------
    # Inbound updates
    # ------------------------------------------------------------------

    def find(self, path: str) -> Optional[Any]:
        """First registered observable whose full dotted path is ``path``."""
        parts = path.rsplit(self.settings.path_separator, 1)
        leaf = parts[-1]
        for observable in self.observables():
            if observable.key == leaf and self.path_of(observable) == path:
                return observable

        # Elements of whole-array arrays are reachable through their array
        if len(parts) == 2:
            owner = self.find(parts[0])
            if owner is not None and hasattr(owner, "child"):
                try:
                    return owner.child(leaf)
                except KeyError:
                    return None
        return None

    def resolve(self, path: str) -> Any:
        """Like ``find`` but raises ``KeyNotFoundError`` when nothing matches."""
        observable = self.find(path)
        if observable is None:
            raise KeyNotFoundError(path)
        return observable

    def find_by_key(self, key: str) -> Optional[Any]:
        """First registered observable whose own (leaf) key is ``key``."""
        for observable in self.observables():
            if observable.key == key:
                return observable
        return None

    def update(self, path: str, value_text: str) -> bool:
        """
        Apply an external text update to the observable at ``path``.

        The update is silent: no notification is emitted for it.

        Returns:
            ``True`` if an observable matched, ``False`` otherwise.

        Raises:
            ParseError: If the text cannot be converted; nothing is changed.
        """
        return self._apply(self.find(path), path, value_text)

    def update_by_key(self, key: str, value_text: str) -> bool:
        """
        Apply an update to the first observable whose leaf key is ``key``.

        Fields with the same name in different subtrees are indistinguishable
        here; prefer ``update`` with a full path.
        """
        return self._apply(self.find_by_key(key), key, value_text)

    def _apply(self, observable: Any, target: str, value_text: str) -> bool:
        if observable is None:
            logger.debug("No observable matches '%s'", target)
            return False
        try:
            observable.apply_text_update(value_text)
        except ParseError as e:
            logger.warning("Rejected update of '%s': %s", target, e)
            raise
        logger.debug("Updated '%s' from text %r", target, value_text)
        return True

    def __repr__(self) -> str:
        return f"Registry({len(self)} observables, listener={self._listener!r})"


_default_registry: Optional[Registry] = None
_default_lock = threading.Lock()


def get_default_registry() -> Registry:
    """Process-wide registry, created on first use."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = Registry(settings=Settings.from_env())
        return _default_registry


def set_default_registry(registry: Optional[Registry]) -> Optional[Registry]:
    """Install ``registry`` as the process-wide default and return the old one."""
    global _default_registry
    with _default_lock:
        previous = _default_registry
        _default_registry = registry
        return previous


def _reset_default_registry() -> None:
    """Drop the process-wide registry (testing utility)."""
    set_default_registry(None)
