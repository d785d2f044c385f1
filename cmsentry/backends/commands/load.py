from typing import Any
from typing import Dict

from cmsentry import commands
from cmsentry.backends.components import Backend
from cmsentry.components import Context


@commands.load.register(Context, Backend, dict)
def load(context: Context, backend: Backend, config: Dict[str, Any]):
    return backend
