from typing import Any
from typing import Dict

from cmsentry import commands
from cmsentry.backends.memory.components import MemoryFileStorage
from cmsentry.backends.memory.components import MemorySchemaSource
from cmsentry.components import Context


@commands.load.register(Context, MemoryFileStorage, dict)
def load(context: Context, backend: MemoryFileStorage, config: Dict[str, Any]):
    rc = context.get('rc')
    backend.files = {}
    backend.uploaded_by = (
        config.get('uploaded_by') or
        rc.get('files', 'uploaded_by', default=None)
    )
    return backend


@commands.load.register(Context, MemorySchemaSource, dict)
def load(context: Context, backend: MemorySchemaSource, config: Dict[str, Any]):
    backend.collections = {}
    for collection in config.get('collections') or []:
        backend.add(collection)
    return backend
