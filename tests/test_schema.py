import json
import logging

import pytest

from cmsentry import exceptions
from cmsentry.components import Context
from cmsentry.core.config import RawConfig
from cmsentry.core.enums import FieldKind
from cmsentry.testing.context import create_test_context
from cmsentry.testing.schema import load_test_collection
from cmsentry.types.datatype import File
from cmsentry.types.datatype import NestedSchema
from cmsentry.types.datatype import Relationship
from cmsentry.types.datatype import Scalar
from cmsentry.types.datatype import Unknown
from cmsentry.types.schema import fetch_collection
from cmsentry.types.schema import get_field_params
from cmsentry.types.schema import load_collection_file


def test_load_flat_descriptors(context: Context):
    collection = load_test_collection(context, [
        {'key': 'title', 'type': 'short_text', 'label': 'Title'},
        {'key': 'published_on', 'type': 'date'},
        {'key': 'author', 'type': 'relationship', 'relatedCollectionId': 'authors'},
        {'key': 'cover', 'type': 'file'},
        {'key': 'gallery', 'type': 'file', 'multiple': True},
    ])
    fields = collection.schema.fields
    assert list(fields) == ['title', 'published_on', 'author', 'cover', 'gallery']
    assert isinstance(fields['title'].dtype, Scalar)
    assert isinstance(fields['published_on'].dtype, Scalar)
    assert isinstance(fields['author'].dtype, Relationship)
    assert isinstance(fields['cover'].dtype, File)
    assert fields['title'].label == 'Title'
    assert fields['title'].place == 'title'
    assert fields['author'].dtype.related_collection == 'authors'
    assert fields['cover'].multiple is False
    assert fields['gallery'].multiple is True
    assert fields['gallery'].dtype.kind == FieldKind.file
    assert fields['title'].schema is collection.schema
    assert collection.schema.collection is collection


def test_load_api_descriptors(context: Context):
    collection = load_test_collection(context, [
        {
            'fieldConfig': {
                'key': 'sections',
                'type': 'nested_schema',
                'label': 'Sections',
            },
            'configOptions': {
                'nestedSchemaConfig': {
                    'isMultiple': True,
                    'fields': [
                        {'fieldConfig': {'key': 'heading', 'type': 'short_text'}},
                        {
                            'fieldConfig': {'key': 'author', 'type': 'relationship'},
                            'configOptions': {
                                'relationshipConfig': {
                                    'relatedCollectionId': 'authors',
                                    'isMultiple': False,
                                },
                            },
                        },
                        {'key': 'image', 'type': 'file'},
                    ],
                },
            },
        },
    ])
    sections = collection.schema.fields['sections']
    assert sections.label == 'Sections'
    assert sections.multiple is True
    assert isinstance(sections.dtype, NestedSchema)

    nested = sections.dtype.schema
    assert nested.depth == 1
    assert nested.parent is sections
    assert nested.collection is collection
    assert nested.place() == 'sections'
    assert list(nested.fields) == ['heading', 'author', 'image']
    assert nested.fields['author'].place == 'sections.author'
    assert nested.fields['author'].dtype.related_collection == 'authors'
    assert nested.fields['image'].dtype.kind == FieldKind.file


def test_field_params_defaults():
    assert get_field_params({'key': 'title', 'type': 'short_text'}) == {
        'key': 'title',
        'type': 'short_text',
        'label': None,
        'multiple': False,
        'related_collection': None,
        'nested_fields': [],
    }


def test_unknown_type(context: Context, caplog):
    with caplog.at_level(logging.WARNING, logger='cmsentry'):
        collection = load_test_collection(context, [
            {'key': 'location', 'type': 'geo_point'},
        ])
    field = collection.schema.fields['location']
    assert isinstance(field.dtype, Unknown)
    assert field.dtype.kind == FieldKind.unknown
    assert field.dtype.name == 'geo_point'
    assert "Field 'location' has unknown type 'geo_point'" in caplog.text


@pytest.mark.parametrize('descriptor', [
    {'type': 'short_text'},
    {'key': '', 'type': 'short_text'},
    {'key': 'title'},
    {'fieldConfig': {'key': 'title'}},
])
def test_missing_key_or_type(context: Context, descriptor):
    with pytest.raises(exceptions.InvalidFieldSchema):
        load_test_collection(context, [descriptor])


def test_descriptor_must_be_a_mapping(context: Context):
    with pytest.raises(exceptions.InvalidFieldSchema) as e:
        load_test_collection(context, ['title'])
    assert e.value.message == "Invalid field descriptor: expected a mapping, got str."


def test_duplicate_key(context: Context):
    with pytest.raises(exceptions.DuplicateFieldKey) as e:
        load_test_collection(context, [
            {'key': 'title', 'type': 'short_text'},
            {'key': 'title', 'type': 'long_text'},
        ])
    assert e.value.context['key'] == 'title'


def test_duplicate_key_in_nested_schema(context: Context):
    with pytest.raises(exceptions.DuplicateFieldKey) as e:
        load_test_collection(context, [
            {'key': 'title', 'type': 'short_text'},
            {'key': 'sections', 'type': 'nested_schema', 'nestedFields': [
                {'key': 'title', 'type': 'short_text'},
                {'key': 'title', 'type': 'short_text'},
            ]},
        ])
    assert e.value.context['field'] == 'sections'


def _nest(depth: int):
    fields = [{'key': 'title', 'type': 'short_text'}]
    for i in range(depth, 0, -1):
        fields = [{'key': f'level{i}', 'type': 'nested_schema', 'nestedFields': fields}]
    return fields


def test_nesting_depth_limit(rc: RawConfig):
    context = create_test_context(rc.fork({'schema.max_depth': 2}))

    collection = load_test_collection(context, _nest(2))
    level2 = collection.schema.fields['level1'].dtype.schema.fields['level2']
    assert level2.place == 'level1.level2'
    assert level2.dtype.schema.depth == 2

    with pytest.raises(exceptions.NestingTooDeep) as e:
        load_test_collection(context, _nest(3))
    assert e.value.message == (
        "Nested schema is too deep, maximum allowed nesting depth is 2."
    )
    assert e.value.context['field'] == 'level1.level2.level3'


def test_default_nesting_depth_limit(context: Context):
    load_test_collection(context, _nest(8))
    with pytest.raises(exceptions.NestingTooDeep):
        load_test_collection(context, _nest(9))


def test_load_collection_from_yaml(context: Context, tmp_path):
    path = tmp_path / 'articles.yml'
    path.write_text(
        'id: articles\n'
        'project: blog\n'
        'fields:\n'
        '  - key: title\n'
        '    type: short_text\n'
        '  - key: cover\n'
        '    type: file\n'
    )
    collection = load_collection_file(context, path)
    assert collection.id == 'articles'
    assert collection.project == 'blog'
    assert list(collection.schema.fields) == ['title', 'cover']


def test_load_collection_from_json_list(context: Context, tmp_path):
    path = tmp_path / 'articles.json'
    path.write_text(json.dumps([
        {'key': 'title', 'type': 'short_text'},
    ]))
    collection = load_collection_file(context, path, project='news', id='articles')
    assert collection.id == 'articles'
    assert collection.project == 'news'
    assert list(collection.schema.fields) == ['title']


def test_load_collection_file_must_contain_fields(context: Context, tmp_path):
    path = tmp_path / 'articles.yml'
    path.write_text('title\n')
    with pytest.raises(exceptions.InvalidFieldSchema):
        load_collection_file(context, path)


@pytest.mark.asyncio
async def test_fetch_collection(context: Context):
    store = context.get('store')
    store.schemas.add({
        'id': 'articles',
        'projectId': 'blog',
        'name': 'Articles',
        'slug': 'articles',
        'fields': [
            {'fieldConfig': {'key': 'title', 'type': 'short_text'}},
        ],
    })
    collection = await fetch_collection(context, 'articles')
    assert collection.id == 'articles'
    assert collection.project == 'blog'
    assert collection.name == 'Articles'
    assert list(collection.schema.fields) == ['title']


@pytest.mark.asyncio
async def test_fetch_unknown_collection(context: Context):
    with pytest.raises(exceptions.CollectionNotFound):
        await fetch_collection(context, 'missing')
