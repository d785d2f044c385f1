from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Tuple

import enum
import logging
import os
import pathlib
import sys

from ruamel.yaml import YAML

from cmsentry.utils.imports import importstr
from cmsentry.utils.schema import NA

Key = Tuple[str, ...]

ENV_PREFIX = 'CMSENTRY_'

yaml = YAML(typ='safe')

log = logging.getLogger(__name__)


def read_config(args=None, envfile=None):
    rc = RawConfig()
    rc.read([
        Path('cmsentry', 'cmsentry.config:CONFIG'),
        EnvFile('envfile', envfile or '.env'),
        EnvVars('envvars', os.environ),
        CliArgs('cliargs', args or []),
    ])

    # Inject extension provided defaults
    configs = rc.get('config', cast=list, default=[])
    if configs:
        rc.read([Path(c, c) for c in configs], after='cmsentry')

    return rc


class KeyFormat(str, enum.Enum):
    cfg = 'cfg'
    env = 'env'


class ConfigSource:
    name: str = None

    def __init__(self, name=None, config=None):
        self.name = name or self.name or type(self).__name__
        self.config = config

    def __str__(self):
        return self.name

    def __repr__(self):
        return type(self).__module__ + '.' + type(self).__name__ + '(' + repr(self.name) + ')'

    def read(self):
        config = {}
        for k, v in self.config.items():
            config.update(_traverse(v, k))
        self.config = config

    def keys(self) -> Iterator[Key]:
        yield from self.config

    def get(self, key: Key):
        return self.config.get(key, NA)


class PyDict(ConfigSource):

    def read(self):
        self.config = {
            tuple(k.split('.')): v
            for k, v in self.config.items()
        }
        super().read()


class Path(PyDict):

    def read(self):
        if self.config.endswith(('.yml', '.yaml')):
            path = pathlib.Path(self.config)
            self.config = yaml.load(path.read_text()) or {}
        else:
            self.config = importstr(self.config)
        super().read()


class CliArgs(PyDict):
    name = 'cli'

    def read(self):
        config = {}
        for arg in self.config:
            key, val = arg.split('=', 1)
            if ',' in val:
                val = [v.strip() for v in val.split(',')]
            config[key] = val
        self.config = config
        super().read()


class EnvVars(ConfigSource):
    name = 'env'

    def read(self):
        config = {}
        for key, val in self.config.items():
            if not key.startswith(ENV_PREFIX):
                continue
            key = key[len(ENV_PREFIX):]
            config[tuple(key.lower().split('__'))] = val
        self.config = config
        super().read()


class EnvFile(EnvVars):

    def read(self):
        config = {}
        path = pathlib.Path(self.config)
        if path.exists():
            with path.open() as f:
                for line in f:
                    line = line.strip()
                    if line == '' or line.startswith('#') or '=' not in line:
                        continue
                    name, value = line.split('=', 1)
                    config[name.strip()] = value.strip()
        self.config = config
        super().read()


class RawConfig:
    """A raw configuration reader component

    Reads configuration directly from supported configuration `sources`.
    Sources are read in order, values from later sources override values from
    earlier ones.

    Currently supported configuration sources are:

    - `PyDict` - python `dict` objects.
    - `Path` - python module path pointing to a `dict` or YAML file path.
    - `EnvVars` - environment variables with `CMSENTRY_` prefix.
    - `EnvFile` - `.env` files containing variables with `CMSENTRY_` prefix.
    - `CliArgs` - `-o` command line arguments with `name=value` values.

    """
    sources: List[ConfigSource]

    def __init__(self, sources: Optional[List[ConfigSource]] = None):
        self._locked = False
        self.sources = sources or []
        self._keys: Dict[Key, List[str]] = {}
        self._keys = self._update_keys()

    def read(
        self,
        sources: List[ConfigSource],
        after: Optional[str] = None,
    ):
        if self._locked:
            raise Exception(
                "Configuration is locked, use `rc.fork()` if you need to "
                "change configuration."
            )

        for config in sources:
            log.debug("Reading config from %s.", config.name)
            config.read()

        if after is not None:
            pos = (i for i, s in enumerate(self.sources) if s.name == after)
            pos = next(pos, None)
            if pos is None:
                raise Exception(f"Given after value {after!r} does not exist.")
            pos += 1
            self.sources[pos:pos] = sources
        else:
            self.sources.extend(sources)

        self._keys = self._update_keys()

    def add(self, name, params):
        self.read([PyDict(name, params)])
        return self

    def fork(self, sources=None, after=None) -> RawConfig:
        rc = RawConfig(list(self.sources))
        if sources:
            if isinstance(sources, dict):
                rc.add('fork', sources)
            else:
                rc.read(sources, after)
        return rc

    def lock(self):
        self._locked = True

    def get(
        self,
        *key: str,
        default=NA,
        cast=None,
        required=False,
        origin=False,
    ) -> Any:
        value, config = self._get_config_value(key, default)

        if cast is not None:
            if cast is list and isinstance(value, str):
                value = [v.strip() for v in value.split(',')] if value else []
            elif value is not None and value is not NA:
                value = cast(value)

        if required and value is None:
            name = '.'.join(key)
            raise Exception(f"{name!r} is a required configuration option.")

        if origin:
            return value, (config.name if config else '')
        else:
            return value

    def keys(self, *key: str) -> List[str]:
        return list(self._keys.get(key, []))

    def getall(self, *key: str, origin=False):
        keys = self.keys(*key)
        if keys:
            for k in keys:
                yield from self.getall(*key, k, origin=origin)
        else:
            res = self.get(*key, origin=origin)
            res = res if origin else (res,)
            yield (key,) + res

    def to_dict(self, *names: str) -> Dict[str, Any]:
        """Return nested dict of all values under given key prefix."""
        result = {}
        if not self.keys(*names):
            return result
        for key, val in self.getall(*names):
            node = result
            *parents, last = key[len(names):]
            for k in parents:
                node = node.setdefault(k, {})
            node[last] = val
        return result

    def dump(self, *names, fmt: KeyFormat = KeyFormat.cfg, file=sys.stdout):
        table = [('Origin', 'Name', 'Value')]
        for key, val, origin in self.getall(origin=True):
            if names and not any(_key_matches(key, name) for name in names):
                continue

            if fmt == KeyFormat.env:
                key = ENV_PREFIX + '__'.join(key).upper()
            else:
                key = '.'.join(key)

            if isinstance(val, list):
                for i, v in enumerate(val):
                    table.append((origin, key + f'.{i}', v))
            else:
                table.append((origin, key, val))

        sizes = [max(len(str(row[i])) for row in table) for i in range(3)]
        table = table[:1] + [tuple('-' * s for s in sizes)] + table[1:]
        if file:
            for row in table:
                print('  '.join([str(x).ljust(s) for x, s in zip(row, sizes)]).rstrip(), file=file)
        else:
            return table

    def _update_keys(self) -> Dict[Key, List[str]]:
        # Collect inner keys of all nesting levels, for example ('a', 'b', 'c')
        # gives: () -> ['a'], ('a',) -> ['b'], ('a', 'b') -> ['c'].
        keys: Dict[Key, List[str]] = {}
        for config in self.sources:
            for key in config.keys():
                for i in range(len(key)):
                    inner = keys.setdefault(key[:i], [])
                    if key[i] not in inner:
                        inner.append(key[i])
        # Paths holding an explicit value are leaves, not containers.
        for key in list(keys):
            if key and any(c.get(key) is not NA for c in self.sources):
                del keys[key]
        return keys

    def _get_config_value(self, key: Key, default: Any = NA):
        assert isinstance(key, tuple)
        for config in reversed(self.sources):
            val = config.get(key)
            if val is not NA:
                return val, config
        if key in self._keys:
            return self.to_dict(*key), None
        if default is NA:
            default = None
        return default, None


def _traverse(value, path=()):
    if isinstance(value, dict) and value:
        for k, v in value.items():
            yield from _traverse(v, path + (k,))
    else:
        yield path, value


def _key_matches(key: Key, name: str) -> bool:
    parts = name.split('.')
    return len(parts) <= len(key) and all(
        key[i].startswith(k)
        for i, k in enumerate(parts) if k
    )
