from __future__ import annotations

import contextlib
import logging
from typing import Any
from typing import Awaitable
from typing import Callable
from typing import Dict
from typing import Optional

from cmsentry import exceptions
from cmsentry.commands.transform import hydrate_for_display
from cmsentry.commands.transform import prepare_for_save
from cmsentry.components import Collection
from cmsentry.components import Context
from cmsentry.components import EntryRecord
from cmsentry.core.enums import EntryState

log = logging.getLogger(__name__)


async def _persist(
    collection: Collection,
    operation: str,
    func: Callable[..., Awaitable[EntryRecord]],
    *args,
) -> EntryRecord:
    try:
        return await func(*args)
    except exceptions.BaseError:
        raise
    except Exception as e:
        raise exceptions.PersistenceError(
            collection,
            operation=operation,
            error=e,
        ) from e


class EntryEditor:
    """Draft/published lifecycle of a single entry

    Editor owns local copy of the entry, the copy is replaced only when a
    remote call succeeds, so after a failure the editor still holds the last
    known persisted state.

    Only one mutation (save, publish or unpublish) can run at a time, starting
    another one while previous is still running raises `EntryBusy`.
    """

    context: Context
    collection: Collection
    entry: EntryRecord

    def __init__(self, context: Context, collection: Collection, entry: EntryRecord):
        self.context = context
        self.collection = collection
        self.entry = entry
        self._pending: Optional[str] = None

    def __repr__(self):
        return (
            f'<{self.__class__.__module__}.{self.__class__.__name__}('
            f'{self.collection.id!r}, {self.entry.id!r}, {self.state.value})>'
        )

    @property
    def state(self) -> EntryState:
        return self.entry.state

    @property
    def has_unpublished_changes(self) -> bool:
        return self.entry.has_unpublished_changes

    @classmethod
    async def open(
        cls,
        context: Context,
        collection: Collection,
        entry_id: str,
    ) -> EntryEditor:
        store = context.get('store')
        entry = await _persist(collection, 'get', store.entries.get, collection, entry_id)
        return cls(context, collection, entry)

    @classmethod
    async def create(
        cls,
        context: Context,
        collection: Collection,
        data: Dict[str, Any],
    ) -> EntryEditor:
        store = context.get('store')
        data = await prepare_for_save(context, data, collection.schema)
        entry = await _persist(collection, 'create', store.entries.create, collection, data)
        log.info("Created entry %s in %s.", entry.id, collection.id)
        return cls(context, collection, entry)

    async def hydrate(self) -> Dict[str, Any]:
        return await hydrate_for_display(self.context, self.entry, self.collection.schema)

    async def save(self, data: Dict[str, Any]) -> EntryRecord:
        with self._mutation('save'):
            store = self.context.get('store')
            data = await prepare_for_save(self.context, data, self.collection.schema)
            self.entry = await _persist(
                self.collection,
                'save',
                store.entries.save_draft,
                self.collection,
                self.entry.id,
                data,
            )
            log.info("Saved draft of entry %s.", self.entry.id)
            return self.entry

    async def publish(self) -> EntryRecord:
        with self._mutation('publish'):
            store = self.context.get('store')
            self.entry = await _persist(
                self.collection,
                'publish',
                store.entries.publish,
                self.collection,
                self.entry.id,
            )
            log.info("Published entry %s.", self.entry.id)
            return self.entry

    async def unpublish(self) -> EntryRecord:
        with self._mutation('unpublish'):
            store = self.context.get('store')
            self.entry = await _persist(
                self.collection,
                'unpublish',
                store.entries.unpublish,
                self.collection,
                self.entry.id,
            )
            log.info("Unpublished entry %s.", self.entry.id)
            return self.entry

    @contextlib.contextmanager
    def _mutation(self, operation: str):
        if self._pending is not None:
            raise exceptions.EntryBusy(
                self.entry,
                operation=operation,
                pending=self._pending,
            )
        self._pending = operation
        try:
            yield
        finally:
            self._pending = None
