"""In-process RemoteStore used for local development and tests.

Collections are plain dicts keyed by record id. Every successful write emits
a fresh snapshot to the subscribers of that path; `emit()` pushes the current
contents on demand.
"""
from __future__ import annotations

import copy
import time
import uuid
from typing import Dict, List, Optional

from enrollment_admin.core.errors import StoreWriteError
from enrollment_admin.services.logger import log_debug
from enrollment_admin.services.remote_store import RemoteStore, SnapshotCallback, Subscription


def _now_ms() -> int:
    return int(time.time() * 1000)


class InMemoryRemoteStore(RemoteStore):
    def __init__(self, initial: Optional[Dict[str, dict]] = None, auto_emit: bool = True):
        self.data: Dict[str, dict] = copy.deepcopy(initial) if initial else {}
        self.auto_emit = auto_emit
        self.calls: List[tuple] = []
        self._subscriptions: Dict[str, List[Subscription]] = {}

    # -------------------------
    # Reads
    # -------------------------
    def snapshot(self, path: str) -> Optional[dict]:
        contents = self.data.get(path)
        return copy.deepcopy(contents) if contents else None

    def subscribe(self, path: str, on_data: SnapshotCallback) -> Subscription:
        subscription = Subscription(path, on_data)
        self._subscriptions.setdefault(path, []).append(subscription)
        subscription.add_close_hook(lambda: self._subscriptions[path].remove(subscription))
        subscription.deliver(self.snapshot(path))
        return subscription

    def emit(self, path: str, data=...):
        """Push a snapshot to every live subscriber of `path`.

        Without `data` the current contents are sent; passing `data` sends
        that raw value instead (e.g. legacy-shaped records) without storing it.
        """
        payload = self.snapshot(path) if data is ... else copy.deepcopy(data)
        for subscription in list(self._subscriptions.get(path, [])):
            subscription.deliver(payload)

    def subscriber_count(self, path: str) -> int:
        return len(self._subscriptions.get(path, []))

    # -------------------------
    # Writes
    # -------------------------
    async def create(self, path: str, payload: dict) -> str:
        self.calls.append(("create", path, payload))
        record_id = f"-{uuid.uuid4().hex[:19]}"
        now = _now_ms()
        self.data.setdefault(path, {})[record_id] = {**copy.deepcopy(payload), "createdAt": now, "updatedAt": now}
        log_debug("memory_store_created", {"path": path, "id": record_id})
        self._after_write(path)
        return record_id

    async def update(self, path: str, record_id: str, partial: dict) -> None:
        self.calls.append(("update", path, record_id, partial))
        collection = self.data.get(path) or {}
        if record_id not in collection:
            raise StoreWriteError("update", f"{path}/{record_id}", KeyError(record_id))
        collection[record_id] = {**collection[record_id], **copy.deepcopy(partial), "updatedAt": _now_ms()}
        self._after_write(path)

    async def delete(self, path: str, record_id: str) -> None:
        self.calls.append(("delete", path, record_id))
        (self.data.get(path) or {}).pop(record_id, None)
        self._after_write(path)

    def _after_write(self, path: str):
        if self.auto_emit:
            self.emit(path)
