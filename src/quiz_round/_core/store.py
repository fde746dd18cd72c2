# Area: Core
"""
quiz_round._core.store — Reactive store
========================================

Wraps a plain nested dict/list structure so that every mutation is
observed and coalesced into one change notification per tick.

Composite values are handed out as explicit wrapper views (StoreDict,
StoreList). The store itself only ever holds plain data, so a snapshot
is a deep copy with no wrapper artifacts.
"""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import MutableMapping, MutableSequence
from typing import Any, Callable, Iterator, Optional, Sequence, Tuple, Union

from .scheduler import LoopScheduler, Scheduler

logger = logging.getLogger("quiz_round.store")

Path = Union[str, Sequence[Any], None]
ChangeHandler = Callable[[], Any]


def split_path(path: Path) -> Tuple[Any, ...]:
    """Normalize a dotted string or key sequence into a key tuple."""
    if path is None or path == "":
        return ()
    if isinstance(path, str):
        return tuple(path.split("."))
    return tuple(path)


def unwrap(value: Any) -> Any:
    """Return the plain data behind a store view (or the value itself)."""
    if isinstance(value, (StoreDict, StoreList)):
        return value._target
    return value


def _child(node: Any, key: Any) -> Any:
    if isinstance(node, list):
        return node[int(key)]
    return node[key]


class ReactiveStore:
    """
    Observable wrapper around plain nested data.

    The first mutation in an idle tick arms a single deferred flush through
    the scheduler; later mutations in the same tick are absorbed. The flush
    calls the change handler exactly once and disarms.

    Usage:
        store = ReactiveStore({"players": {}}, on_change=broadcast)
        store.set("players.p1", {"id": "p1", "points": 0})
        store.get("players.p1")["points"] += 10   # still one notification
    """

    def __init__(
        self,
        data: Optional[Any] = None,
        on_change: Optional[ChangeHandler] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self._data = unwrap(data) if data is not None else {}
        self._handler = on_change
        self._scheduler = scheduler or LoopScheduler()
        self._pending = False

    # ── Observation ─────────────────────────────────────────────

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def pending(self) -> bool:
        """True while a change notification is armed but not yet delivered."""
        return self._pending

    def on_change(self, handler: ChangeHandler) -> None:
        """Register the change handler, replacing any previous one."""
        self._handler = handler

    def _touch(self) -> None:
        if self._pending:
            return
        self._pending = True
        self._scheduler.call_soon(self._flush)

    def _flush(self) -> None:
        self._pending = False
        if self._handler is not None:
            self._handler()

    # ── Access ──────────────────────────────────────────────────

    def _wrap(self, value: Any) -> Any:
        if isinstance(value, dict):
            return StoreDict(self, value)
        if isinstance(value, list):
            return StoreList(self, value)
        return value

    def _resolve(self, keys: Sequence[Any]) -> Any:
        node = self._data
        for key in keys:
            node = _child(node, key)
        return node

    @property
    def root(self) -> "StoreDict":
        return self._wrap(self._data)

    def get(self, path: Path = None, default: Any = None) -> Any:
        """
        Return the value at ``path``.

        Composite values come back wrapped; two calls for the same path may
        return distinct view objects over the same underlying data.
        """
        try:
            return self._wrap(self._resolve(split_path(path)))
        except (KeyError, IndexError, ValueError, TypeError):
            return default

    def set(self, path: Path, value: Any) -> None:
        """Store ``value`` at ``path`` and schedule a change notification."""
        keys = split_path(path)
        value = unwrap(value)
        if not keys:
            self._data = value
        else:
            parent = self._resolve(keys[:-1])
            if isinstance(parent, list):
                parent[int(keys[-1])] = value
            else:
                parent[keys[-1]] = value
        self._touch()

    def delete(self, path: Path) -> None:
        """Remove the value at ``path``; a missing key is a no-op."""
        keys = split_path(path)
        if keys:
            try:
                parent = self._resolve(keys[:-1])
                if isinstance(parent, list):
                    del parent[int(keys[-1])]
                else:
                    parent.pop(keys[-1], None)
            except (KeyError, IndexError, ValueError, TypeError):
                logger.debug("delete(%r): nothing to remove", path)
        self._touch()

    def mutate(self, fn: Callable[["StoreDict"], Any]) -> Any:
        """Apply ``fn`` to the root view; its mutations share one notification."""
        return fn(self.root)

    # ── Serialization ───────────────────────────────────────────

    def snapshot(self) -> Any:
        """Deep, plain, JSON-serializable copy of the current data."""
        return copy.deepcopy(self._data)

    def to_json(self) -> str:
        return json.dumps(self._data)


class StoreDict(MutableMapping):
    """Mapping view over a dict held by a ReactiveStore."""

    __slots__ = ("_store", "_target")

    def __init__(self, store: ReactiveStore, target: dict) -> None:
        self._store = store
        self._target = target

    def __getitem__(self, key: Any) -> Any:
        return self._store._wrap(self._target[key])

    def __setitem__(self, key: Any, value: Any) -> None:
        self._target[key] = unwrap(value)
        self._store._touch()

    def __delitem__(self, key: Any) -> None:
        self._target.pop(key, None)
        self._store._touch()

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._target))

    def __len__(self) -> int:
        return len(self._target)

    def __contains__(self, key: object) -> bool:
        return key in self._target

    def __eq__(self, other: object) -> bool:
        return self._target == unwrap(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"StoreDict({self._target!r})"

    def snapshot(self) -> dict:
        return copy.deepcopy(self._target)


class StoreList(MutableSequence):
    """Sequence view over a list held by a ReactiveStore."""

    __slots__ = ("_store", "_target")

    def __init__(self, store: ReactiveStore, target: list) -> None:
        self._store = store
        self._target = target

    def __getitem__(self, index: Any) -> Any:
        if isinstance(index, slice):
            return [self._store._wrap(value) for value in self._target[index]]
        return self._store._wrap(self._target[index])

    def __setitem__(self, index: Any, value: Any) -> None:
        if isinstance(index, slice):
            self._target[index] = [unwrap(item) for item in value]
        else:
            self._target[index] = unwrap(value)
        self._store._touch()

    def __delitem__(self, index: Any) -> None:
        del self._target[index]
        self._store._touch()

    def __len__(self) -> int:
        return len(self._target)

    def __iter__(self) -> Iterator[Any]:
        for value in list(self._target):
            yield self._store._wrap(value)

    def insert(self, index: int, value: Any) -> None:
        self._target.insert(index, unwrap(value))
        self._store._touch()

    def __eq__(self, other: object) -> bool:
        return self._target == unwrap(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"StoreList({self._target!r})"

    def snapshot(self) -> list:
        return copy.deepcopy(self._target)
