from typing import Any
from typing import Dict
from typing import Optional
from typing import Tuple

import logging
import re


log = logging.getLogger(__name__)


class UnknownValue:

    def __str__(self):
        return '[UNKNOWN]'

    __repr__ = __str__


UNKNOWN_VALUE = UnknownValue()


def resolve_context_vars(schema: Dict[str, str], this: Optional[Any], kwargs: dict):
    """Resolve error context values from given kwargs and schema.

    `schema` maps context names to dotted paths, that are looked up starting
    from `kwargs` (with `this` available as `this`). Paths ending with `()`
    are called.
    """
    if this is not None:
        from cmsentry import commands
        schema = {
            **commands.get_error_context(this),
            **schema,
        }
        kwargs = {**kwargs, 'this': this}

    added = set()
    context = {}
    if this is not None:
        context['component'] = type(this).__module__ + '.' + type(this).__name__
    for k, path in schema.items():
        path = path or k
        name, *names = path.split('.')
        if name not in kwargs:
            continue
        added.add(name)
        value = kwargs
        for name in [name] + names:
            if name.endswith('()'):
                name = name[:-2]
                func = True
            else:
                func = False
            if isinstance(value, dict):
                value = value.get(name)
            elif hasattr(value, name):
                value = getattr(value, name)
            else:
                value = UNKNOWN_VALUE
                break
            if func:
                value = value()
        if value is not UNKNOWN_VALUE and value is not None:
            context[k] = value

    for k in set(kwargs) - added:
        v = kwargs[k]
        if not isinstance(v, (int, float, str)):
            v = str(v)
        context[k] = v

    names = [
        'component',
        'project',
        'collection',
        'entry',
        'field',
        'type',
    ]
    names += [x for x in schema if x not in names]
    names += [x for x in kwargs if x not in names]

    def sort_key(item: Tuple[str, Any]) -> Tuple[int, str]:
        key = item[0]
        try:
            return names.index(key), key
        except ValueError:
            return len(names), key

    return {k: v for k, v in sorted(context.items(), key=sort_key)}


class BaseError(Exception):
    type: str = None
    status_code: int = 500
    template: str = None
    context: Dict[str, Any] = {}

    def __init__(self, *args, **kwargs):
        if len(args) == 0:
            this = None
        elif len(args) == 1:
            this = args[0]
        else:
            this = None
            log.error(
                "Only one positional argument is allowed, but %d was given.",
                len(args),
                stack_info=True,
            )

        self.type = this.type if this is not None and hasattr(this, 'type') else 'system'
        self.context = resolve_context_vars(self.context, this, kwargs)
        super().__init__(self.message)

    def __str__(self):
        return (
            self.message + '\n' +
            ('  Context:\n' if self.context else '') +
            ''.join(
                f'    {k}: {v}\n'
                for k, v in self.context.items()
            )
        )

    @property
    def message(self):
        try:
            return _render_template(self)
        except KeyError:
            log.exception("Can't render error message for %s.", self.__class__.__name__)
            return self.template


def error_response(error: BaseError):
    return {
        'type': error.type,
        'code': type(error).__name__,
        'template': error.template,
        'context': error.context,
        'message': error.message,
    }


def _render_template(error: BaseError):
    try:
        return error.template.format(**error.context)
    except KeyError:
        context = error.context.copy()
        template_vars_re = re.compile(r'\{(\w+)')
        for match in template_vars_re.finditer(error.template):
            name = match.group(1)
            if name not in context:
                context[name] = UNKNOWN_VALUE
        return error.template.format(**context)


class UserError(BaseError):
    status_code = 400


class InvalidFieldSchema(UserError):
    template = "Invalid field descriptor: {error}."


class DuplicateFieldKey(UserError):
    template = "Field {key!r} is defined more than once."


class NestingTooDeep(UserError):
    template = (
        "Nested schema is too deep, maximum allowed nesting depth is {limit}."
    )


class MissingRelationshipId(UserError):
    template = "Populated relationship value does not have an 'id'."


class HydrationResolutionError(BaseError):
    status_code = 502
    template = "Failed to resolve preview URL for file {key!r}: {error}"


class UploadError(BaseError):
    status_code = 502
    template = "Failed to upload file {filename!r}: {error}"


class PersistenceError(BaseError):
    status_code = 502
    template = "Failed to {operation} entry: {error}"


class EntryNotFound(PersistenceError):
    status_code = 404
    template = "Entry {entry_id!r} not found."


class FileNotFound(BaseError):
    status_code = 404
    template = "File {key!r} not found."


class EntryBusy(UserError):
    status_code = 409
    template = (
        "Can't {operation} entry while {pending} is still in progress."
    )


class UnknownBackend(BaseError):
    template = "Unknown {name!r} backend type {backend_type!r}."


class MissingBackendParam(BaseError):
    template = "Backend {backend!r} requires parameter {param!r}."


class CollectionNotFound(BaseError):
    status_code = 404
    template = "Collection {collection_id!r} not found."
