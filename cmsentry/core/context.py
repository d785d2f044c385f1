from __future__ import annotations

import importlib
import logging
import pathlib
from typing import Type

from cmsentry import commands
from cmsentry import exceptions
from cmsentry.backends.components import Backend
from cmsentry.components import Context
from cmsentry.components import Store
from cmsentry.core.config import RawConfig
from cmsentry.core.config import read_config
from cmsentry.utils.imports import importstr

log = logging.getLogger(__name__)

BACKENDS = ('files', 'entries', 'schemas')


def create_context(
    name: str = 'cmsentry',
    rc: RawConfig = None,
    context: Context = None,
    args=None,
    envfile=None,
) -> Context:
    if rc is None:
        rc = read_config(args, envfile)

    load_commands(rc.get('commands', 'modules', cast=list))

    if context is None:
        Context_: Type[Context] = rc.get('components', 'core', 'context', cast=importstr, required=True)
        context = Context_(name)

    context.set('rc', rc)

    Store_: Type[Store] = rc.get('components', 'core', 'store', cast=importstr, required=True)
    store = context.set('store', Store_())
    load_backends(context, store)

    return context


def load_commands(modules):
    for module_path in modules:
        module = importlib.import_module(module_path)
        path = pathlib.Path(module.__file__).resolve()
        if path.name != '__init__.py':
            continue
        path = path.parent
        base = path.parents[module_path.count('.')]
        for path in sorted(path.glob('**/*.py')):
            if path.name == '__init__.py':
                module_path = path.parent.relative_to(base)
            else:
                module_path = path.relative_to(base).with_suffix('')
            module_path = '.'.join(module_path.parts)
            importlib.import_module(module_path)


def load_backends(context: Context, store: Store) -> None:
    rc = context.get('rc')
    for name in BACKENDS:
        config = rc.to_dict('backends', name)
        type_ = config.get('type')
        path = rc.get('components', 'backends', name, type_, default=None)
        if path is None:
            raise exceptions.UnknownBackend(name=name, backend_type=type_)
        Backend_: Type[Backend] = importstr(path)
        backend = Backend_()
        backend.name = name
        backend.type = type_
        backend.config = config
        log.debug("Loading %s backend %r.", name, type_)
        setattr(store, name, commands.load(context, backend, config))
