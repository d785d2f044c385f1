from typing import Dict

from cmsentry import commands
from cmsentry.components import EntryRecord


@commands.get_error_context.register(EntryRecord)
def get_error_context(entry: EntryRecord, *, prefix='this') -> Dict[str, str]:
    return {
        'collection': f'{prefix}.collection_id',
        'entry': f'{prefix}.id',
    }
