from typing import Any
from typing import Dict
from typing import List
from typing import Optional

from cmsentry.types.datatype import File
from cmsentry.types.file.components import EDITOR_KEYS
from cmsentry.types.file.components import STORED_KEYS


def get_scope(dtype: File) -> Optional[str]:
    """Get file storage scope of a file field.

    All files of a collection, including files of nested schemas, are stored
    in the scope of collection project.
    """
    collection = dtype.field.schema.collection
    if collection is None:
        return None
    return collection.project or collection.id


def get_file_url(item: Dict[str, Any]) -> Optional[str]:
    return item.get('url') or item.get('downloadURL')


def get_stored_keys(item: Dict[str, Any]) -> List[str]:
    return [k for k in EDITOR_KEYS if k in item]


def strip_editor_keys(item: Dict[str, Any]) -> Dict[str, Any]:
    keep = item.get(STORED_KEYS) or ()
    return {
        k: v
        for k, v in item.items()
        if k != STORED_KEYS and (k not in EDITOR_KEYS or k in keep)
    }
