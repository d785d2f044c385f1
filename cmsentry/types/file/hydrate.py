from __future__ import annotations

import asyncio
import logging
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

from cmsentry import commands
from cmsentry import exceptions
from cmsentry.components import Context
from cmsentry.types.datatype import File
from cmsentry.types.file.components import STORED_KEYS
from cmsentry.types.file.helpers import get_file_url
from cmsentry.types.file.helpers import get_scope
from cmsentry.types.file.helpers import get_stored_keys

log = logging.getLogger(__name__)


@commands.hydrate.register(Context, File, list)
async def hydrate(context: Context, dtype: File, value: List[Any]) -> List[Any]:
    # Results are collected by position, not by completion order.
    return list(await asyncio.gather(*(
        _hydrate_item(context, dtype, item, index)
        for index, item in enumerate(value)
    )))


@commands.hydrate.register(Context, File, dict)
async def hydrate(context: Context, dtype: File, value: Dict[str, Any]) -> Dict[str, Any]:
    if not (value.get('key') or get_file_url(value)):
        return value
    return await _hydrate_item(context, dtype, value)


async def _hydrate_item(
    context: Context,
    dtype: File,
    item: Any,
    index: Optional[int] = None,
) -> Any:
    if not isinstance(item, dict):
        return item

    key = item.get('key')
    if key:
        id_ = key
    elif index is not None:
        id_ = f'{dtype.field.key}-{index}'
    else:
        id_ = None

    preview = await _resolve_preview(context, dtype, item)
    result = {
        'id': id_,
        'file': None,
        'preview': preview,
        **item,
    }
    stored = get_stored_keys(item)
    if stored:
        result[STORED_KEYS] = stored
    return result


async def _resolve_preview(
    context: Context,
    dtype: File,
    item: Dict[str, Any],
) -> Optional[str]:
    url = get_file_url(item)
    if url:
        return url

    key = item.get('key')
    if not key:
        return None

    store = context.get('store')
    try:
        return await store.files.get_signed_url(get_scope(dtype), key)
    except Exception as e:
        error = exceptions.HydrationResolutionError(dtype, key=key, error=e)
        log.warning("%s", error.message, exc_info=e)
        return None
