from typing import Dict

from cmsentry import commands
from cmsentry.backends.components import Backend


@commands.get_error_context.register(Backend)
def get_error_context(backend: Backend, *, prefix='this') -> Dict[str, str]:
    return {
        'backend': f'{prefix}.name',
        'type': f'{prefix}.type',
    }
