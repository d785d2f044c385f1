from __future__ import annotations

from typing import Any
from typing import Dict
from typing import TYPE_CHECKING

from cmsentry.components import EntryRecord
from cmsentry.components import LocalFile

if TYPE_CHECKING:
    from cmsentry.components import Collection
    from cmsentry.types.file.components import FileReference


class Backend:
    # Backend kind, one of `files`, `entries` or `schemas`.
    name: str = None
    # Backend type as given in configuration, for example `memory`.
    type: str = None
    # Original configuration values.
    config: Dict[str, Any] = None

    def __repr__(self):
        return (
            f'<{self.__class__.__module__}.{self.__class__.__name__}'
            f'(name={self.name!r}, type={self.type!r}) at 0x{id(self):02x}>'
        )


class FileStorage(Backend):
    """Stores binaries of file fields"""

    async def upload_file(self, scope: str, local_file: LocalFile) -> FileReference:
        raise NotImplementedError

    async def get_signed_url(self, scope: str, key: str) -> str:
        raise NotImplementedError


class EntryStore(Backend):
    """Persists collection entries

    Draft and published snapshots are independent, `publish` promotes draft
    to published, `unpublish` withdraws published snapshot, but keeps the
    draft.
    """

    async def create(self, collection: Collection, data: Dict[str, Any]) -> EntryRecord:
        raise NotImplementedError

    async def get(self, collection: Collection, entry_id: str) -> EntryRecord:
        raise NotImplementedError

    async def save_draft(
        self,
        collection: Collection,
        entry_id: str,
        data: Dict[str, Any],
    ) -> EntryRecord:
        raise NotImplementedError

    async def publish(self, collection: Collection, entry_id: str) -> EntryRecord:
        raise NotImplementedError

    async def unpublish(self, collection: Collection, entry_id: str) -> EntryRecord:
        raise NotImplementedError


class SchemaSource(Backend):
    """Supplies raw collection schemas"""

    async def get_collection(self, collection_id: str) -> Dict[str, Any]:
        raise NotImplementedError
