from __future__ import annotations

import asyncio
import logging
from typing import Any
from typing import Dict
from typing import Union

from cmsentry import commands
from cmsentry.components import Context
from cmsentry.components import EntryRecord
from cmsentry.components import Schema
from cmsentry.types.datatype import DataType
from cmsentry.utils.schema import NA

log = logging.getLogger(__name__)


def _present_fields(schema: Schema, data: Dict[str, Any]):
    # Fields are visited in schema order, values not described by the schema
    # are left as is.
    return [field for key, field in schema.fields.items() if key in data]


@commands.hydrate.register(Context, Schema, dict)
async def hydrate(context: Context, schema: Schema, data: Dict[str, Any]) -> Dict[str, Any]:
    fields = _present_fields(schema, data)
    values = await asyncio.gather(*(
        commands.hydrate(context, field.dtype, data[field.key])
        for field in fields
    ))
    result = dict(data)
    for field, value in zip(fields, values):
        result[field.key] = value
    return result


@commands.hydrate.register(Context, DataType, object)
async def hydrate(context: Context, dtype: DataType, value: Any) -> Any:
    return value


@commands.normalize_relationships.register(Context, Schema, dict)
def normalize_relationships(
    context: Context,
    schema: Schema,
    data: Dict[str, Any],
) -> Dict[str, Any]:
    result = dict(data)
    for field in _present_fields(schema, data):
        result[field.key] = commands.normalize_relationships(
            context,
            field.dtype,
            data[field.key],
        )
    return result


@commands.normalize_relationships.register(Context, DataType, object)
def normalize_relationships(context: Context, dtype: DataType, value: Any) -> Any:
    return value


@commands.normalize_nested.register(Context, Schema, dict)
def normalize_nested(
    context: Context,
    schema: Schema,
    data: Dict[str, Any],
) -> Dict[str, Any]:
    result = dict(data)
    for field in _present_fields(schema, data):
        result[field.key] = commands.normalize_nested(
            context,
            field.dtype,
            data[field.key],
        )
    return result


@commands.normalize_nested.register(Context, DataType, object)
def normalize_nested(context: Context, dtype: DataType, value: Any) -> Any:
    return value


@commands.materialize_files.register(Context, Schema, dict)
async def materialize_files(
    context: Context,
    schema: Schema,
    data: Dict[str, Any],
) -> Dict[str, Any]:
    result = dict(data)
    for field in _present_fields(schema, data):
        value = await commands.materialize_files(
            context,
            field.dtype,
            data[field.key],
        )
        if value is NA:
            del result[field.key]
        else:
            result[field.key] = value
    return result


@commands.materialize_files.register(Context, DataType, object)
async def materialize_files(context: Context, dtype: DataType, value: Any) -> Any:
    return value


async def hydrate_for_display(
    context: Context,
    entry: Union[EntryRecord, Dict[str, Any]],
    schema: Schema,
) -> Dict[str, Any]:
    """Turn stored entry data into a tree ready for the editor.

    Draft data is used if entry has a draft, published data otherwise.
    """
    if isinstance(entry, EntryRecord):
        data = entry.working_data
    else:
        data = entry or {}
    return await commands.hydrate(context, schema, data)


async def prepare_for_save(
    context: Context,
    data: Dict[str, Any],
    schema: Schema,
) -> Dict[str, Any]:
    """Turn edited tree into data ready to be stored.

    Relationships are reduced to ids on all nesting levels first, then pending
    files are uploaded. If an upload fails, files uploaded before the failure
    are not removed from storage.
    """
    data = commands.normalize_relationships(context, schema, data)
    data = commands.normalize_nested(context, schema, data)
    return await commands.materialize_files(context, schema, data)
