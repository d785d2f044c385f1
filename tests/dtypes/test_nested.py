import pytest

from cmsentry import commands
from cmsentry.commands.transform import hydrate_for_display
from cmsentry.components import Context
from cmsentry.components import LocalFile
from cmsentry.testing.schema import load_test_collection

SIGNED = 'https://files.example.com/blog/{}?signature=test'


@pytest.fixture()
def collection(context: Context):
    return load_test_collection(context, [
        {'key': 'title', 'type': 'short_text'},
        {'key': 'sections', 'type': 'nested_schema', 'multiple': True, 'nestedFields': [
            {'key': 'heading', 'type': 'short_text'},
            {'key': 'author', 'type': 'relationship'},
            {'key': 'image', 'type': 'file'},
            {'key': 'blocks', 'type': 'nested_schema', 'multiple': True, 'nestedFields': [
                {'key': 'ref', 'type': 'relationship'},
                {'key': 'attachments', 'type': 'file'},
            ]},
        ]},
        {'key': 'seo', 'type': 'nested_schema', 'nestedFields': [
            {'key': 'image', 'type': 'file'},
        ]},
    ])


def test_normalize_nested(context: Context, collection):
    data = {
        'title': 'Hello',
        'sections': [
            {
                'heading': 'One',
                'author': {'id': 'a1', 'name': 'Ann'},
                'blocks': [
                    {'ref': {'id': 'r1'}},
                    {'ref': 'r2'},
                ],
            },
            {'heading': 'Two', 'author': 'a2'},
        ],
    }
    result = commands.normalize_nested(context, collection.schema, data)
    assert result == {
        'title': 'Hello',
        'sections': [
            {
                'heading': 'One',
                'author': 'a1',
                'blocks': [
                    {'ref': 'r1'},
                    {'ref': 'r2'},
                ],
            },
            {'heading': 'Two', 'author': 'a2'},
        ],
    }
    assert data['sections'][0]['author'] == {'id': 'a1', 'name': 'Ann'}


@pytest.mark.parametrize('value', [None, '', [], ['text', None]])
def test_normalize_nested_passthrough(context: Context, collection, value):
    result = commands.normalize_nested(context, collection.schema, {
        'sections': value,
    })
    assert result == {'sections': value}


@pytest.mark.asyncio
async def test_hydrate_nested(context: Context, collection):
    result = await hydrate_for_display(context, {
        'sections': [
            {
                'heading': 'One',
                'image': {'key': 'a.png'},
                'blocks': [{'attachments': [{'key': 'b.pdf'}]}],
            },
            {'heading': 'Two'},
        ],
        'seo': {'image': {'key': 'c.png'}},
    }, collection.schema)
    assert result == {
        'sections': [
            {
                'heading': 'One',
                'image': {
                    'id': 'a.png',
                    'file': None,
                    'preview': SIGNED.format('a.png'),
                    'key': 'a.png',
                },
                'blocks': [
                    {
                        'attachments': [
                            {
                                'id': 'b.pdf',
                                'file': None,
                                'preview': SIGNED.format('b.pdf'),
                                'key': 'b.pdf',
                            },
                        ],
                    },
                ],
            },
            {'heading': 'Two'},
        ],
        'seo': {
            'image': {
                'id': 'c.png',
                'file': None,
                'preview': SIGNED.format('c.png'),
                'key': 'c.png',
            },
        },
    }


@pytest.mark.asyncio
async def test_materialize_nested(context: Context, collection):
    storage = context.get('store').files
    result = await commands.materialize_files(context, collection.schema, {
        'sections': [
            {
                'heading': 'One',
                'image': '',
                'blocks': [
                    {
                        'ref': 'r1',
                        'attachments': [
                            {'id': 'x', 'file': LocalFile('x.pdf', b'pdf'), 'preview': None},
                            {'key': 'y.pdf'},
                        ],
                    },
                    {'attachments': []},
                ],
            },
            {
                'heading': 'Two',
                'image': {'id': 'z', 'file': LocalFile('z.png', b'png'), 'preview': None},
            },
        ],
        'seo': {'image': None},
    })
    one, two = result['sections']
    assert one['heading'] == 'One'
    assert 'image' not in one
    attachments = one['blocks'][0]['attachments']
    assert attachments[0]['filename'] == 'x.pdf'
    assert attachments[1] == {'key': 'y.pdf'}
    assert one['blocks'][1] == {}
    assert two['image']['filename'] == 'z.png'
    assert result['seo'] == {}
    assert storage.calls('upload:start') == ['x.pdf', 'z.png']
