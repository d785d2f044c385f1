import datetime
import uuid

from cmsentry.components import LocalFile


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def new_file_key(local_file: LocalFile) -> str:
    # Random prefix keeps keys unique when the same name is uploaded twice.
    return f'{uuid.uuid4().hex}-{local_file.name}'
