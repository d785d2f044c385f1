from __future__ import annotations

from typing import Any
from typing import Dict
from typing import Optional
from typing import TYPE_CHECKING
from typing import Union

import dataclasses
import datetime
import mimetypes
import pathlib

from cmsentry.core.enums import EntryState

if TYPE_CHECKING:
    from cmsentry.backends.components import EntryStore
    from cmsentry.backends.components import FileStorage
    from cmsentry.backends.components import SchemaSource
    from cmsentry.types.datatype import DataType


class Context:
    """Named values shared by commands, like `rc` and `store`.

    A name can be set only once.
    """

    def __init__(self, name: str):
        self._name = name
        self._context = {}

    def __repr__(self):
        return (
            f'<{self.__class__.__module__}.{self.__class__.__name__}({self._name}) '
            f'at 0x{id(self):02x}>'
        )

    def set(self, name, value):
        """Set `name` to `value`."""
        if name in self._context:
            raise Exception(f"Context variable {name!r} has been already set.")
        self._context[name] = value
        return value

    def get(self, name):
        if name not in self._context:
            raise Exception(f"Unknown context variable {name!r}.")
        return self._context[name]


class Store:
    """Collaborators used by the editor

    Holds file storage, entry persistence and schema source backends, loaded
    from configuration by `create_context`.
    """
    files: FileStorage = None
    entries: EntryStore = None
    schemas: SchemaSource = None


class Collection:
    id: str = None
    # File storage scope, all files of collection entries are uploaded here.
    project: str = None
    name: str = None
    slug: str = None
    schema: Schema = None

    type = 'collection'

    def __repr__(self):
        return f'<{self.__class__.__module__}.{self.__class__.__name__}(id={self.id!r})>'


class Schema:
    """Ordered list of fields of a collection or of a nested schema field"""

    collection: Collection = None
    # Owning nested_schema field, None for collection level schema.
    parent: Field = None
    depth: int = 0
    fields: Dict[str, Field]

    type = 'schema'

    def __init__(self):
        self.fields = {}

    def __repr__(self):
        return (
            f'<{self.__class__.__module__}.{self.__class__.__name__}('
            f'{self.place()!r}, fields={list(self.fields)!r})>'
        )

    def place(self) -> str:
        return self.parent.place if self.parent else ''


class Field:
    key: str = None
    # Type name as given in field configuration, for example `short_text`.
    type: str = None
    label: str = None
    # Informational only, runtime handling depends on the given value.
    multiple: bool = False
    related_collection: str = None
    # Dotted path of the field from collection root, for example
    # `sections.images`.
    place: str = None
    schema: Schema = None
    dtype: DataType = None

    def __repr__(self):
        return f'<{self.__class__.__module__}.{self.__class__.__name__}({self.place!r}:{self.type})>'


@dataclasses.dataclass
class LocalFile:
    """Binary picked in the editor, but not yet uploaded"""

    name: str
    content: bytes
    content_type: str = 'application/octet-stream'

    @classmethod
    def from_path(cls, path: Union[str, pathlib.Path]) -> LocalFile:
        path = pathlib.Path(path)
        content_type, _ = mimetypes.guess_type(path.name)
        return cls(
            name=path.name,
            content=path.read_bytes(),
            content_type=content_type or 'application/octet-stream',
        )

    @property
    def size(self) -> int:
        return len(self.content)


def _parse_datetime(value: Any) -> Optional[datetime.datetime]:
    if value is None or isinstance(value, datetime.datetime):
        return value
    return datetime.datetime.fromisoformat(value.replace('Z', '+00:00'))


def _format_datetime(value: Optional[datetime.datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclasses.dataclass
class EntryRecord:
    id: str
    collection_id: str
    # Published snapshot.
    data: Dict[str, Any] = dataclasses.field(default_factory=dict)
    # Working snapshot, saved by the editor, but not yet published.
    data_draft: Optional[Dict[str, Any]] = None
    published: bool = False
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    type = 'entry'

    @property
    def working_data(self) -> Dict[str, Any]:
        if self.data_draft is not None:
            return self.data_draft
        return self.data or {}

    @property
    def state(self) -> EntryState:
        return EntryState.published if self.published else EntryState.draft

    @property
    def has_unpublished_changes(self) -> bool:
        return (
            self.published and
            self.data_draft is not None and
            self.data_draft != self.data
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> EntryRecord:
        return cls(
            id=data['id'],
            collection_id=data['collectionId'],
            data=data.get('data') or {},
            data_draft=data.get('dataDraft'),
            published=bool(data.get('published', False)),
            created_at=_parse_datetime(data.get('createdAt')),
            updated_at=_parse_datetime(data.get('updatedAt')),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'id': self.id,
            'collectionId': self.collection_id,
            'data': self.data,
            'published': self.published,
            'createdAt': _format_datetime(self.created_at),
            'updatedAt': _format_datetime(self.updated_at),
        }
        if self.data_draft is not None:
            result['dataDraft'] = self.data_draft
        return result

