"""Explicit transactional scope for multi-step writes.

Usage::

    with UnitOfWork() as uow:
        user = create_user(...)
        store = create_store(user, ...)
        uow.on_commit(lambda: event_bus.publish(StoreRegistered(store.id)))

Any exception inside the block rolls every step back.  Callbacks
registered with ``on_commit`` run only once the outermost transaction
commits.
"""

from __future__ import annotations

from typing import Callable, Optional

from django.db import transaction


class UnitOfWork:
    def __init__(self, using: Optional[str] = None) -> None:
        self._using = using
        self._atomic = transaction.atomic(using=using)

    def __enter__(self) -> UnitOfWork:
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        return bool(self._atomic.__exit__(exc_type, exc, tb))

    def on_commit(self, callback: Callable[[], None]) -> None:
        transaction.on_commit(callback, using=self._using)
