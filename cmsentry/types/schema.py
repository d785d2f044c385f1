from __future__ import annotations

import logging
import pathlib
from typing import Any
from typing import Dict
from typing import List
from typing import Union

from ruamel.yaml import YAML

from cmsentry import commands
from cmsentry import exceptions
from cmsentry.components import Collection
from cmsentry.components import Context
from cmsentry.components import Field
from cmsentry.components import Schema
from cmsentry.types.datatype import DataType
from cmsentry.utils.imports import importstr

log = logging.getLogger(__name__)

yaml = YAML(typ='safe')


def get_field_params(data: Dict[str, Any]) -> Dict[str, Any]:
    """Get field parameters from a raw field descriptor.

    Two descriptor shapes are supported. Flat descriptors:

        {
            'key': 'sections',
            'type': 'nested_schema',
            'multiple': True,
            'nestedFields': [...],
        }

    And descriptors as returned by the CMS schema API, where nested fields are
    part of field configuration options:

        {
            'fieldConfig': {'key': 'sections', 'type': 'nested_schema'},
            'configOptions': {
                'nestedSchemaConfig': {'fields': [...], 'isMultiple': True},
            },
        }

    """
    config = data['fieldConfig'] if 'fieldConfig' in data else data
    options = data.get('configOptions') or {}
    nested = options.get('nestedSchemaConfig') or {}
    relationship = options.get('relationshipConfig') or {}

    if 'multiple' in data:
        multiple = data['multiple']
    else:
        multiple = nested.get('isMultiple', relationship.get('isMultiple', False))

    return {
        'key': config.get('key'),
        'type': config.get('type'),
        'label': config.get('label'),
        'multiple': bool(multiple),
        'related_collection': (
            data.get('relatedCollectionId') or
            relationship.get('relatedCollectionId')
        ),
        'nested_fields': data.get('nestedFields', nested.get('fields')) or [],
    }


@commands.load.register(Context, Collection, dict)
def load(context: Context, collection: Collection, data: Dict[str, Any]) -> Collection:
    collection.id = data.get('id')
    collection.project = data.get('project') or data.get('projectId')
    collection.name = data.get('name')
    collection.slug = data.get('slug')

    schema = Schema()
    schema.collection = collection
    collection.schema = commands.load(context, schema, data.get('fields') or [])
    return collection


@commands.load.register(Context, Schema, list)
def load(context: Context, schema: Schema, data: List[Dict[str, Any]]) -> Schema:
    for params in data:
        if not isinstance(params, dict):
            raise exceptions.InvalidFieldSchema(
                schema,
                error=f"expected a mapping, got {type(params).__name__}",
            )
        field = Field()
        field.schema = schema
        field = commands.load(context, field, params, schema)
        if field.key in schema.fields:
            raise exceptions.DuplicateFieldKey(schema, key=field.key)
        schema.fields[field.key] = field
    return schema


@commands.load.register(Context, Field, dict, Schema)
def load(
    context: Context,
    field: Field,
    data: Dict[str, Any],
    schema: Schema,
) -> Field:
    params = get_field_params(data)
    for name in ('key', 'type'):
        if not params[name] or not isinstance(params[name], str):
            raise exceptions.InvalidFieldSchema(
                schema,
                error=f"{name!r} must be a non empty string",
                given=params[name],
            )

    field.key = params['key']
    field.type = params['type']
    field.label = params['label']
    field.multiple = params['multiple']
    field.related_collection = params['related_collection']
    place = schema.place()
    field.place = f'{place}.{field.key}' if place else field.key

    field.dtype = _create_dtype(context, field)
    field.dtype = commands.load(context, field.dtype, params)
    return field


def _create_dtype(context: Context, field: Field) -> DataType:
    rc = context.get('rc')
    path = rc.get('components', 'types', field.type, default=None)
    if path is None:
        path = rc.get('components', 'unknown_type', required=True)
    DataType_ = importstr(path)
    dtype: DataType = DataType_()
    dtype.name = field.type
    dtype.field = field
    return dtype


def load_collection(
    context: Context,
    data: Union[Dict[str, Any], List[Dict[str, Any]]],
    **kwargs,
) -> Collection:
    """Load collection from a dict or from a list of field descriptors.

    Additional `kwargs` override collection attributes, like `project`.
    """
    if isinstance(data, list):
        data = {'fields': data}
    data = {**data, **kwargs}
    return commands.load(context, Collection(), data)


def read_schema_file(path: Union[str, pathlib.Path]) -> Union[dict, list]:
    """Read collection schema from a YAML or JSON file."""
    path = pathlib.Path(path)
    data = yaml.load(path.read_text())
    if not isinstance(data, (dict, list)):
        raise exceptions.InvalidFieldSchema(
            path=str(path),
            error="schema file must contain a mapping or a list of fields",
        )
    return data


def load_collection_file(
    context: Context,
    path: Union[str, pathlib.Path],
    **kwargs,
) -> Collection:
    log.debug("Loading collection schema from %s.", path)
    data = read_schema_file(path)
    kwargs = {k: v for k, v in kwargs.items() if v is not None}
    return load_collection(context, data, **kwargs)


async def fetch_collection(context: Context, collection_id: str) -> Collection:
    """Load collection using configured schema source."""
    store = context.get('store')
    data = await store.schemas.get_collection(collection_id)
    return load_collection(context, data, id=collection_id)


@commands.get_error_context.register(Collection)
def get_error_context(collection: Collection, *, prefix='this') -> Dict[str, str]:
    return {
        'project': f'{prefix}.project',
        'collection': f'{prefix}.id',
    }


@commands.get_error_context.register(Schema)
def get_error_context(schema: Schema, *, prefix='this') -> Dict[str, str]:
    context = commands.get_error_context(schema.collection, prefix=f'{prefix}.collection')
    context['field'] = f'{prefix}.place()'
    return context


@commands.get_error_context.register(Field)
def get_error_context(field: Field, *, prefix='this') -> Dict[str, str]:
    context = commands.get_error_context(field.schema, prefix=f'{prefix}.schema')
    context['field'] = f'{prefix}.place'
    context['type'] = f'{prefix}.type'
    return context
