from __future__ import annotations

import json
import pathlib
from typing import Any
from typing import Callable
from typing import Dict

from cmsentry.components import LocalFile
from cmsentry.components import Schema
from cmsentry.core.enums import FieldKind


def read_json(path: pathlib.Path) -> Any:
    with path.open(encoding='utf-8') as f:
        return json.load(f)


def dump_json(data: Any) -> str:
    return json.dumps(data, indent='  ', ensure_ascii=False, default=str)


def _map(value: Any, func: Callable[[Any], Any]) -> Any:
    if isinstance(value, list):
        return [func(v) for v in value]
    return func(value)


def _to_local_file(item: Any, base: pathlib.Path) -> Any:
    # {"file": "path/to/file"} marks a file picked for upload.
    if isinstance(item, dict) and isinstance(item.get('file'), str):
        local = LocalFile.from_path(base / item['file'])
        return {
            **item,
            'id': item.get('id') or local.name,
            'file': local,
            'preview': item.get('preview'),
        }
    return item


def attach_local_files(
    schema: Schema,
    data: Dict[str, Any],
    base: pathlib.Path,
) -> Dict[str, Any]:
    """Replace file paths given in edited data with local files.

    Relative paths are resolved from `base`.
    """
    result = dict(data)
    for key, field in schema.fields.items():
        if key not in data:
            continue
        if field.dtype.kind == FieldKind.file:
            result[key] = _map(data[key], lambda item: _to_local_file(item, base))
        elif field.dtype.kind == FieldKind.nested_schema:
            nested = field.dtype.schema
            result[key] = _map(data[key], lambda item: (
                attach_local_files(nested, item, base)
                if isinstance(item, dict) else item
            ))
    return result
