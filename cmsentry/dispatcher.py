from __future__ import annotations

import inspect
from typing import Any
from typing import Callable
from typing import Dict
from typing import Iterator
from typing import TypeVar
from typing import cast

from multipledispatch.dispatcher import Dispatcher
from multipledispatch.dispatcher import str_signature

F = TypeVar('F', bound=Callable[..., Any])

_commands: Dict[str, Command] = {}


def command(name: str = None) -> Callable[[F], Command]:
    """Define a new command.

    Decorated function only serves as documentation, actual implementations
    are added with `Command.register`.
    """

    def _(func: F) -> Command:
        _name = func.__name__ if name is None else name
        if _name in _commands:
            raise Exception(f"{_name!r} is already defined.")
        _commands[_name] = Command(_name, doc=func.__doc__)
        return _commands[_name]

    return cast(Command, _)


class Command(Dispatcher):

    def register(self, *signature_types) -> Callable[[F], Command]:
        def _(func: F) -> Command:
            types = signature_types or tuple(_find_func_types(func))
            self.add(types, func)
            return self
        return cast(Command, _)

    def __getitem__(self, types):
        types = types if isinstance(types, tuple) else (types,)
        func = self.dispatch(*types)
        if not func:
            raise NotImplementedError(
                f"Could not find signature for {self.name}: "
                f"<{str_signature(types)}>"
            )
        return func


def _find_func_types(func: Callable) -> Iterator[type]:
    # Signature is taken from annotations of leading positional arguments,
    # stops at first keyword only or not annotated argument.
    sig = inspect.signature(func)

    kinds = {
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    }
    for param in sig.parameters.values():
        if param.kind not in kinds or param.annotation is param.empty:
            break
        yield param.annotation
