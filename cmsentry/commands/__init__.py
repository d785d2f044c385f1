from __future__ import annotations

from typing import Any
from typing import Dict

from cmsentry.dispatcher import command


@command()
def load():
    """Load primitive data structures to python-native objects.

    Currently used for:

    - Load backends from configuration:

        load(Context, FileStorage, dict) -> FileStorage
        load(Context, EntryStore, dict) -> EntryStore

    - Load field descriptors:

        load(Context, Schema, list) -> Schema
        load(Context, Field, dict, Schema) -> Field
        load(Context, DataType, dict) -> DataType

    """


@command()
def hydrate():
    """Turn stored value into a value ready for editing.

    hydrate(Context, Schema, dict) -> dict
    hydrate(Context, DataType, object) -> object

    Coroutine. Resolves preview URLs of stored files. Never fails because of a
    single file, that could not be resolved.
    """


@command()
def normalize_relationships():
    """Reduce populated relationship values to bare ids.

    normalize_relationships(Context, Schema, dict) -> dict
    normalize_relationships(Context, DataType, object) -> object

    Only fields of the given schema level are normalized, see
    `normalize_nested` for nested schemas.
    """


@command()
def normalize_nested():
    """Apply relationship normalization to all nested schemas recursively.

    normalize_nested(Context, Schema, dict) -> dict
    normalize_nested(Context, DataType, object) -> object
    """


@command()
def materialize_files():
    """Upload pending local files and prune cleared file fields.

    materialize_files(Context, Schema, dict) -> dict
    materialize_files(Context, DataType, object) -> object | NA

    Coroutine. Returns `NA` for values, that must be removed from the stored
    data.
    """


@command()
def get_error_context():
    """Get error context for a component.

    get_error_context(Field, *, prefix='this') -> dict
    """


def get_error_context_default(this: Any, *, prefix: str = 'this') -> Dict[str, str]:
    return {}


get_error_context.add((object,), get_error_context_default)
