CONFIG = {
    'config': [],
    'commands': {
        'modules': [
            'cmsentry.types',
            'cmsentry.commands',
            'cmsentry.backends',
        ],
    },
    'components': {
        'core': {
            'context': 'cmsentry.components:Context',
            'store': 'cmsentry.components:Store',
        },
        'backends': {
            'files': {
                'memory': 'cmsentry.backends.memory.components:MemoryFileStorage',
                'fs': 'cmsentry.backends.fs.components:FileSystemStorage',
            },
            'entries': {
                'memory': 'cmsentry.backends.memory.components:MemoryEntryStore',
            },
            'schemas': {
                'memory': 'cmsentry.backends.memory.components:MemorySchemaSource',
            },
        },
        'types': {
            'short_text': 'cmsentry.types.datatype:Scalar',
            'long_text': 'cmsentry.types.datatype:Scalar',
            'rich_text': 'cmsentry.types.datatype:Scalar',
            'number': 'cmsentry.types.datatype:Scalar',
            'boolean': 'cmsentry.types.datatype:Scalar',
            'date': 'cmsentry.types.datatype:Scalar',
            'time': 'cmsentry.types.datatype:Scalar',
            'timestamp': 'cmsentry.types.datatype:Scalar',
            'dropdown': 'cmsentry.types.datatype:Scalar',
            'slug': 'cmsentry.types.datatype:Scalar',
            'scalar': 'cmsentry.types.datatype:Scalar',
            'relationship': 'cmsentry.types.datatype:Relationship',
            'file': 'cmsentry.types.datatype:File',
            'nested_schema': 'cmsentry.types.datatype:NestedSchema',
        },
        'unknown_type': 'cmsentry.types.datatype:Unknown',
    },
    'backends': {
        'files': {
            'type': 'memory',
        },
        'entries': {
            'type': 'memory',
        },
        'schemas': {
            'type': 'memory',
        },
    },
    'schema': {
        # Maximum number of nested_schema levels below collection fields.
        'max_depth': 8,
    },
    'files': {
        'uploaded_by': 'cmsentry',
    },
}
