from __future__ import annotations

from typing import Any
from typing import Dict
from typing import List

from cmsentry import commands
from cmsentry.components import Context
from cmsentry.types.datatype import NestedSchema


@commands.normalize_nested.register(Context, NestedSchema, list)
def normalize_nested(context: Context, dtype: NestedSchema, value: List[Any]) -> List[Any]:
    return [
        commands.normalize_nested(context, dtype, item)
        for item in value
    ]


@commands.normalize_nested.register(Context, NestedSchema, dict)
def normalize_nested(context: Context, dtype: NestedSchema, value: Dict[str, Any]) -> Dict[str, Any]:
    value = commands.normalize_relationships(context, dtype.schema, value)
    return commands.normalize_nested(context, dtype.schema, value)
