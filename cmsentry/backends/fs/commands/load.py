import pathlib
from typing import Any
from typing import Dict

from cmsentry import commands
from cmsentry import exceptions
from cmsentry.backends.fs.components import FileSystemStorage
from cmsentry.components import Context


@commands.load.register(Context, FileSystemStorage, dict)
def load(context: Context, backend: FileSystemStorage, config: Dict[str, Any]):
    if not config.get('path'):
        raise exceptions.MissingBackendParam(backend, param='path')
    rc = context.get('rc')
    backend.path = pathlib.Path(config['path'])
    backend.uploaded_by = (
        config.get('uploaded_by') or
        rc.get('files', 'uploaded_by', default=None)
    )
    return backend
