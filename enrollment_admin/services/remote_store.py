"""Remote store adapter for the Firebase Realtime Database.

Consumers subscribe to a collection path and always receive the full
collection (a keyed map, or None when the path is empty), first right after
subscribing and then after every change. Writes are coroutines and raise
StoreWriteError on failure; reads and subscriptions never raise.
"""
from __future__ import annotations

import asyncio
import copy
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from enrollment_admin.core.errors import StoreWriteError
from enrollment_admin.services.logger import log_debug, log_error

# Realtime Database server value, resolved to epoch-millis at write time
SERVER_TIMESTAMP = {".sv": "timestamp"}

SnapshotCallback = Callable[[Optional[dict]], None]


class Subscription:
    """Handle for one live subscription. `close()` is the only lifecycle call."""

    def __init__(self, path: str, on_data: SnapshotCallback, loop: asyncio.AbstractEventLoop | None = None):
        self.path = path
        self._on_data = on_data
        self._loop = loop
        self._lock = threading.RLock()
        self._closed = False
        self._on_close: list[Callable[[], None]] = []

    @property
    def closed(self) -> bool:
        return self._closed

    def add_close_hook(self, hook: Callable[[], None]):
        """Run `hook` on close; runs it right away if already closed."""
        with self._lock:
            if not self._closed:
                self._on_close.append(hook)
                return
        hook()

    def deliver(self, data: Optional[dict]):
        """Hand a snapshot to the subscriber, on its loop when one is bound."""
        if self._closed:
            return
        if self._loop is not None:
            try:
                self._loop.call_soon_threadsafe(self._dispatch, data)
            except RuntimeError:
                # loop already closed; nothing left to notify
                return
        else:
            self._dispatch(data)

    def _dispatch(self, data: Optional[dict]):
        with self._lock:
            if self._closed:
                return
            try:
                self._on_data(data)
            except Exception as exc:
                log_error("subscription_callback_failed", {"path": self.path, "error": repr(exc)})

    def close(self):
        with self._lock:
            if self._closed:
                return
            self._closed = True
        for hook in self._on_close:
            try:
                hook()
            except Exception as exc:
                log_error("subscription_close_failed", {"path": self.path, "error": repr(exc)})
        log_debug("subscription_closed", {"path": self.path})


class RemoteStore(ABC):
    @abstractmethod
    def subscribe(self, path: str, on_data: SnapshotCallback) -> Subscription:
        ...

    @abstractmethod
    async def create(self, path: str, payload: dict) -> str:
        ...

    @abstractmethod
    async def update(self, path: str, record_id: str, partial: dict) -> None:
        ...

    @abstractmethod
    async def delete(self, path: str, record_id: str) -> None:
        ...


# -------------------------
# Event helpers
# -------------------------
def _split_path(path: str) -> list[str]:
    return [part for part in (path or "").split("/") if part]


def _as_dict(tree: Any) -> dict:
    # The database returns a list for integer-like keys
    if isinstance(tree, dict):
        return dict(tree)
    if isinstance(tree, list):
        return {str(i): value for i, value in enumerate(tree) if value is not None}
    return {}


def apply_event(tree: Any, event_type: str, path: str, data: Any) -> Any:
    """
    Apply one Realtime Database listener event to a cached snapshot and
    return the new snapshot. `put` replaces the value at `path` (None
    deletes it), `patch` merges children into it. The input is not mutated.
    """
    parts = _split_path(path)

    if not parts:
        if event_type == "patch":
            merged = _as_dict(tree)
            for key, value in (data or {}).items():
                if value is None:
                    merged.pop(key, None)
                else:
                    merged[key] = value
            return merged or None
        return copy.deepcopy(data)

    root = copy.deepcopy(_as_dict(tree))
    node = root
    for part in parts[:-1]:
        # list nodes become index-keyed maps so siblings survive
        child = _as_dict(node.get(part))
        node[part] = child
        node = child

    leaf = parts[-1]
    if event_type == "patch":
        target = _as_dict(node.get(leaf))
        for key, value in (data or {}).items():
            if value is None:
                target.pop(key, None)
            else:
                target[key] = value
        node[leaf] = target
    elif data is None:
        node.pop(leaf, None)
    else:
        node[leaf] = copy.deepcopy(data)

    return root or None


class FirebaseRemoteStore(RemoteStore):
    """RemoteStore over `firebase_admin.db` references."""

    def __init__(self, reference_factory: Callable[[str], Any] | None = None,
                 loop: asyncio.AbstractEventLoop | None = None):
        if reference_factory is None:
            from enrollment_admin.core.firebase import get_reference
            reference_factory = get_reference
        self._reference = reference_factory
        self._loop = loop

    def subscribe(self, path: str, on_data: SnapshotCallback) -> Subscription:
        """
        Open a live subscription. With a loop bound, the blocking SDK calls
        (initial get, listen) run in the loop's default executor so the
        caller's loop keeps serving; without one they run inline.
        """
        subscription = Subscription(path, on_data, loop=self._loop)
        if self._loop is not None:
            self._loop.run_in_executor(None, self._connect, path, subscription)
        else:
            self._connect(path, subscription)
        return subscription

    def _connect(self, path: str, subscription: Subscription):
        state = {"tree": None}
        state_lock = threading.Lock()

        try:
            ref = self._reference(path)
        except Exception as exc:
            log_error("subscribe_failed", {"path": path, "error": repr(exc)})
            return

        # Initial one-time fetch, the listener may not fire right away
        try:
            with state_lock:
                state["tree"] = ref.get()
                current = state["tree"]
            subscription.deliver(current)
        except Exception as exc:
            log_error("initial_fetch_failed", {"path": path, "error": repr(exc)})

        def _listener(event):
            if subscription.closed:
                return
            try:
                with state_lock:
                    state["tree"] = apply_event(state["tree"], event.event_type, event.path, event.data)
                    current = state["tree"]
            except Exception as exc:
                # keep the last good tree
                log_error("listener_event_failed", {"path": path, "error": repr(exc)})
                return
            subscription.deliver(current)

        try:
            registration = ref.listen(_listener)
        except Exception as exc:
            log_error("listen_failed", {"path": path, "error": repr(exc)})
            return

        # closes the listener at once if close() won the race
        subscription.add_close_hook(registration.close)
        log_debug("subscription_opened", {"path": path})

    async def create(self, path: str, payload: dict) -> str:
        body = {**payload, "createdAt": SERVER_TIMESTAMP, "updatedAt": SERVER_TIMESTAMP}
        try:
            new_ref = await asyncio.to_thread(self._reference(path).push, body)
        except Exception as exc:
            log_error("store_create_failed", {"path": path, "error": repr(exc)})
            raise StoreWriteError("create", path, exc) from exc
        log_debug("store_created", {"path": path, "id": new_ref.key})
        return new_ref.key

    async def update(self, path: str, record_id: str, partial: dict) -> None:
        body = {**partial, "updatedAt": SERVER_TIMESTAMP}
        target = f"{path}/{record_id}"
        try:
            await asyncio.to_thread(self._reference(target).update, body)
        except Exception as exc:
            log_error("store_update_failed", {"path": target, "error": repr(exc)})
            raise StoreWriteError("update", target, exc) from exc
        log_debug("store_updated", {"path": target, "fields": sorted(partial)})

    async def delete(self, path: str, record_id: str) -> None:
        target = f"{path}/{record_id}"
        try:
            await asyncio.to_thread(self._reference(target).delete)
        except Exception as exc:
            log_error("store_delete_failed", {"path": target, "error": repr(exc)})
            raise StoreWriteError("delete", target, exc) from exc
        log_debug("store_deleted", {"path": target})
