from __future__ import annotations

import pathlib
from typing import Optional

import aiofiles

from cmsentry import exceptions
from cmsentry.backends.components import FileStorage
from cmsentry.backends.helpers import new_file_key
from cmsentry.backends.helpers import utcnow
from cmsentry.components import LocalFile
from cmsentry.types.file.components import FileReference


class FileSystemStorage(FileStorage):
    """Stores files in a local directory, one subdirectory per scope"""

    path: pathlib.Path = None
    uploaded_by: str = None

    def get_path(self, scope: Optional[str], key: str) -> pathlib.Path:
        base = self.path.resolve()
        path = (base / (scope or '') / key).resolve()
        if base not in path.parents:
            raise exceptions.FileNotFound(self, key=key, scope=scope)
        return path

    async def upload_file(self, scope: Optional[str], local_file: LocalFile) -> FileReference:
        key = new_file_key(local_file)
        path = self.get_path(scope, key)
        path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(path, 'wb') as f:
            await f.write(local_file.content)
        return FileReference(
            key=key,
            filename=local_file.name,
            size=local_file.size,
            contentType=local_file.content_type,
            uploadedAt=utcnow().isoformat(),
            uploadedBy=self.uploaded_by,
        )

    async def get_signed_url(self, scope: Optional[str], key: str) -> str:
        path = self.get_path(scope, key)
        if not path.is_file():
            raise exceptions.FileNotFound(self, key=key, scope=scope)
        return path.as_uri()
