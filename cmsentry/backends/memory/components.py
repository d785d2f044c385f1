from __future__ import annotations

import copy
import uuid
from typing import Any
from typing import Dict
from typing import Optional
from typing import Tuple

from cmsentry import exceptions
from cmsentry.backends.components import EntryStore
from cmsentry.backends.components import FileStorage
from cmsentry.backends.components import SchemaSource
from cmsentry.backends.helpers import new_file_key
from cmsentry.backends.helpers import utcnow
from cmsentry.components import Collection
from cmsentry.components import EntryRecord
from cmsentry.components import LocalFile
from cmsentry.types.file.components import FileReference


class MemoryFileStorage(FileStorage):
    uploaded_by: str = None

    files: Dict[
        Tuple[
            Optional[str],  # scope
            str,            # key
        ],
        LocalFile,
    ]

    def __init__(self):
        self.files = {}

    async def upload_file(self, scope: Optional[str], local_file: LocalFile) -> FileReference:
        key = new_file_key(local_file)
        self.files[(scope, key)] = local_file
        return FileReference(
            key=key,
            filename=local_file.name,
            size=local_file.size,
            contentType=local_file.content_type,
            uploadedAt=utcnow().isoformat(),
            uploadedBy=self.uploaded_by,
        )

    async def get_signed_url(self, scope: Optional[str], key: str) -> str:
        if (scope, key) not in self.files:
            raise exceptions.FileNotFound(self, key=key, scope=scope)
        return f'memory://{scope or ""}/{key}'


class MemoryEntryStore(EntryStore):
    entries: Dict[str, EntryRecord]

    def __init__(self):
        self.entries = {}

    def _get(self, collection: Collection, entry_id: str, operation: str) -> EntryRecord:
        entry = self.entries.get(entry_id)
        if entry is None or entry.collection_id != collection.id:
            raise exceptions.EntryNotFound(
                collection,
                operation=operation,
                entry_id=entry_id,
            )
        return entry

    async def create(self, collection: Collection, data: Dict[str, Any]) -> EntryRecord:
        now = utcnow()
        entry = EntryRecord(
            id=str(uuid.uuid4()),
            collection_id=collection.id,
            data=copy.deepcopy(data),
            published=False,
            created_at=now,
            updated_at=now,
        )
        self.entries[entry.id] = entry
        return copy.deepcopy(entry)

    async def get(self, collection: Collection, entry_id: str) -> EntryRecord:
        return copy.deepcopy(self._get(collection, entry_id, 'get'))

    async def save_draft(
        self,
        collection: Collection,
        entry_id: str,
        data: Dict[str, Any],
    ) -> EntryRecord:
        entry = self._get(collection, entry_id, 'save')
        entry.data_draft = copy.deepcopy(data)
        entry.updated_at = utcnow()
        return copy.deepcopy(entry)

    async def publish(self, collection: Collection, entry_id: str) -> EntryRecord:
        entry = self._get(collection, entry_id, 'publish')
        if entry.data_draft is not None:
            entry.data = copy.deepcopy(entry.data_draft)
        entry.published = True
        entry.updated_at = utcnow()
        return copy.deepcopy(entry)

    async def unpublish(self, collection: Collection, entry_id: str) -> EntryRecord:
        entry = self._get(collection, entry_id, 'unpublish')
        if entry.data_draft is None:
            # Withdrawn content stays available for editing.
            entry.data_draft = copy.deepcopy(entry.data)
        entry.published = False
        entry.updated_at = utcnow()
        return copy.deepcopy(entry)


class MemorySchemaSource(SchemaSource):
    collections: Dict[str, Dict[str, Any]]

    def __init__(self):
        self.collections = {}

    def add(self, collection: Dict[str, Any]) -> None:
        self.collections[collection['id']] = copy.deepcopy(collection)

    async def get_collection(self, collection_id: str) -> Dict[str, Any]:
        if collection_id not in self.collections:
            raise exceptions.CollectionNotFound(self, collection_id=collection_id)
        return copy.deepcopy(self.collections[collection_id])
