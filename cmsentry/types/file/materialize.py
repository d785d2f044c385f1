from __future__ import annotations

import logging
from typing import Any
from typing import Dict
from typing import List

from cmsentry import commands
from cmsentry import exceptions
from cmsentry.components import Context
from cmsentry.components import LocalFile
from cmsentry.types.datatype import File
from cmsentry.types.file.components import FileReference
from cmsentry.types.file.helpers import get_scope
from cmsentry.types.file.helpers import strip_editor_keys
from cmsentry.utils.schema import NA

log = logging.getLogger(__name__)


@commands.materialize_files.register(Context, File, object)
async def materialize_files(context: Context, dtype: File, value: Any):
    # Empty strings, None and other values, that do not reference a file,
    # remove the field.
    return NA


@commands.materialize_files.register(Context, File, list)
async def materialize_files(context: Context, dtype: File, value: List[Any]):
    result = []
    # One upload at a time, in list order.
    for item in value:
        item = await _materialize_item(context, dtype, item)
        if item is not NA:
            result.append(item)
    return result or NA


@commands.materialize_files.register(Context, File, dict)
async def materialize_files(context: Context, dtype: File, value: Dict[str, Any]):
    return await _materialize_item(context, dtype, value)


async def _materialize_item(context: Context, dtype: File, item: Any):
    if not isinstance(item, dict):
        return NA
    if isinstance(item.get('file'), LocalFile):
        return await _upload(context, dtype, item['file'])
    if item.get('key'):
        return strip_editor_keys(item)
    return NA


async def _upload(context: Context, dtype: File, local: LocalFile) -> FileReference:
    store = context.get('store')
    log.info("Uploading %s...", local.name)
    try:
        return await store.files.upload_file(get_scope(dtype), local)
    except exceptions.UploadError:
        raise
    except Exception as e:
        raise exceptions.UploadError(dtype, filename=local.name, error=e) from e
