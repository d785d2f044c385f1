from __future__ import annotations

from typing import Any
from typing import Dict
from typing import List

from cmsentry import commands
from cmsentry.components import Context
from cmsentry.types.datatype import NestedSchema


@commands.materialize_files.register(Context, NestedSchema, list)
async def materialize_files(context: Context, dtype: NestedSchema, value: List[Any]) -> List[Any]:
    result = []
    for item in value:
        result.append(await commands.materialize_files(context, dtype, item))
    return result


@commands.materialize_files.register(Context, NestedSchema, dict)
async def materialize_files(context: Context, dtype: NestedSchema, value: Dict[str, Any]) -> Dict[str, Any]:
    return await commands.materialize_files(context, dtype.schema, value)
