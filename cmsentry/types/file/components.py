from __future__ import annotations

from typing import Any
from typing import Dict
from typing import TypedDict


class FileReference(TypedDict, total=False):
    """Stored file metadata, as returned by file storage"""

    key: str
    filename: str
    size: int
    contentType: str
    uploadedAt: str
    uploadedBy: str
    # Display only, never part of stored file identity.
    url: str
    downloadURL: str
    metadata: Dict[str, Any]


# Keys added to file items by hydration, removed again before saving.
EDITOR_KEYS = ('id', 'file', 'preview')
# Names of editor keys, that came with stored file metadata. Added by
# hydration only when stored metadata has such keys, these are kept on save.
STORED_KEYS = 'storedKeys'
