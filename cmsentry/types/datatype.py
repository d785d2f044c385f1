from __future__ import annotations

import logging
from typing import Any
from typing import Dict

from cmsentry import commands
from cmsentry import exceptions
from cmsentry.components import Context
from cmsentry.components import Field
from cmsentry.components import Schema
from cmsentry.core.enums import FieldKind

log = logging.getLogger(__name__)


class DataType:
    kind: FieldKind
    # Type name as given in field configuration.
    name: str = None
    field: Field = None

    def __repr__(self):
        place = self.field.place if self.field else None
        return f'<{place}:{self.name}>'


class Scalar(DataType):
    kind = FieldKind.scalar


class Relationship(DataType):
    kind = FieldKind.relationship

    related_collection: str = None


class File(DataType):
    kind = FieldKind.file


class NestedSchema(DataType):
    kind = FieldKind.nested_schema

    # Fields of a single nested record, synthesized from field configuration.
    schema: Schema = None


class Unknown(DataType):
    kind = FieldKind.unknown


@commands.load.register(Context, DataType, dict)
def load(context: Context, dtype: DataType, params: Dict[str, Any]) -> DataType:
    return dtype


@commands.load.register(Context, Unknown, dict)
def load(context: Context, dtype: Unknown, params: Dict[str, Any]) -> DataType:
    log.warning(
        "Field %r has unknown type %r, values will be passed through unchanged.",
        dtype.field.place,
        dtype.name,
    )
    return dtype


@commands.load.register(Context, Relationship, dict)
def load(context: Context, dtype: Relationship, params: Dict[str, Any]) -> DataType:
    dtype.related_collection = params.get('related_collection')
    return dtype


@commands.load.register(Context, NestedSchema, dict)
def load(context: Context, dtype: NestedSchema, params: Dict[str, Any]) -> DataType:
    rc = context.get('rc')
    max_depth = rc.get('schema', 'max_depth', cast=int, default=8)

    parent = dtype.field.schema
    schema = Schema()
    schema.collection = parent.collection
    schema.parent = dtype.field
    schema.depth = parent.depth + 1
    if schema.depth > max_depth:
        raise exceptions.NestingTooDeep(dtype.field, limit=max_depth)

    dtype.schema = commands.load(context, schema, params.get('nested_fields') or [])
    return dtype


@commands.get_error_context.register(DataType)
def get_error_context(dtype: DataType, *, prefix='this') -> Dict[str, str]:
    context = commands.get_error_context(dtype.field, prefix=f'{prefix}.field')
    context['type'] = f'{prefix}.name'
    return context
