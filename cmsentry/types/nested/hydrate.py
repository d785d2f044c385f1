from __future__ import annotations

import asyncio
from typing import Any
from typing import Dict
from typing import List

from cmsentry import commands
from cmsentry.components import Context
from cmsentry.types.datatype import NestedSchema


@commands.hydrate.register(Context, NestedSchema, list)
async def hydrate(context: Context, dtype: NestedSchema, value: List[Any]) -> List[Any]:
    return list(await asyncio.gather(*(
        commands.hydrate(context, dtype, item)
        for item in value
    )))


@commands.hydrate.register(Context, NestedSchema, dict)
async def hydrate(context: Context, dtype: NestedSchema, value: Dict[str, Any]) -> Dict[str, Any]:
    return await commands.hydrate(context, dtype.schema, value)
