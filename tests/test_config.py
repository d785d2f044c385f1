import pytest

from cmsentry.core.config import CliArgs
from cmsentry.core.config import EnvFile
from cmsentry.core.config import EnvVars
from cmsentry.core.config import KeyFormat
from cmsentry.core.config import PyDict
from cmsentry.core.config import RawConfig
from cmsentry.core.config import read_config


def test_envvars():
    config = EnvVars('envvars', {
        'CMSENTRY_BACKENDS__FILES__TYPE': 'fs',
        'HOME': '/home/user',
    })
    config.read()
    assert config.config == {
        ('backends', 'files', 'type'): 'fs',
    }


def test_envvars_multipart():
    config = EnvVars('envvars', {
        'CMSENTRY_SCHEMA__MAX_DEPTH': '4',
    })
    config.read()
    assert config.config == {
        ('schema', 'max_depth'): '4',
    }


def test_envfile(tmp_path):
    envfile = tmp_path / '.env'
    envfile.write_text(
        '# comment\n'
        '\n'
        'CMSENTRY_FILES__UPLOADED_BY = editor\n'
        'OTHER=value\n'
    )
    config = EnvFile('envfile', str(envfile))
    config.read()
    assert config.config == {
        ('files', 'uploaded_by'): 'editor',
    }


def test_envfile_does_not_exist(tmp_path):
    config = EnvFile('envfile', str(tmp_path / '.env'))
    config.read()
    assert config.config == {}


def test_cli_args():
    config = CliArgs('cli', [
        'backends.files.type=fs',
        'commands.modules=a,b',
    ])
    config.read()
    assert config.config == {
        ('backends', 'files', 'type'): 'fs',
        ('commands', 'modules'): ['a', 'b'],
    }


def test_later_sources_override_earlier():
    rc = RawConfig()
    rc.read([
        PyDict('defaults', {
            'backends': {
                'files': {
                    'type': 'memory',
                },
            },
            'schema': {
                'max_depth': 8,
            },
        }),
        EnvVars('envvars', {
            'CMSENTRY_SCHEMA__MAX_DEPTH': '3',
        }),
        CliArgs('cli', [
            'backends.files.type=fs',
            'backends.files.path=/tmp/files',
        ]),
    ])
    assert rc.get('schema', 'max_depth', cast=int) == 3
    assert rc.get('backends', 'files', 'type', origin=True) == ('fs', 'cli')
    assert rc.keys() == ['backends', 'schema']
    assert rc.keys('backends', 'files') == ['type', 'path']
    assert rc.to_dict('backends', 'files') == {
        'type': 'fs',
        'path': '/tmp/files',
    }


def test_get_nested_value_as_dict():
    rc = RawConfig()
    rc.add('defaults', {
        'backends.files.type': 'memory',
        'backends.entries.type': 'memory',
    })
    assert rc.get('backends') == {
        'files': {'type': 'memory'},
        'entries': {'type': 'memory'},
    }


def test_get_default_and_required():
    rc = RawConfig()
    rc.add('defaults', {'schema.max_depth': 8})
    assert rc.get('schema', 'limit') is None
    assert rc.get('schema', 'limit', default=5) == 5
    with pytest.raises(Exception) as e:
        rc.get('schema', 'limit', required=True)
    assert str(e.value) == "'schema.limit' is a required configuration option."


def test_get_list_from_string():
    rc = RawConfig()
    rc.add('defaults', {'config': 'a.yml, b.yml', 'empty': ''})
    assert rc.get('config', cast=list) == ['a.yml', 'b.yml']
    assert rc.get('empty', cast=list) == []


def test_fork_does_not_change_parent():
    rc = RawConfig()
    rc.add('defaults', {'backends.files.type': 'memory'})
    rc.lock()

    fork = rc.fork({'backends.files.type': 'fs'})
    assert fork.get('backends', 'files', 'type') == 'fs'
    assert rc.get('backends', 'files', 'type') == 'memory'


def test_locked_config():
    rc = RawConfig()
    rc.lock()
    with pytest.raises(Exception):
        rc.add('more', {'a': 1})


def test_dump():
    rc = RawConfig()
    rc.add('defaults', {
        'backends.files.type': 'memory',
        'config': ['a.yml', 'b.yml'],
    })
    assert rc.dump(file=None)[2:] == [
        ('defaults', 'backends.files.type', 'memory'),
        ('defaults', 'config.0', 'a.yml'),
        ('defaults', 'config.1', 'b.yml'),
    ]
    assert rc.dump('backends', fmt=KeyFormat.env, file=None)[2:] == [
        ('defaults', 'CMSENTRY_BACKENDS__FILES__TYPE', 'memory'),
    ]


def test_read_config_defaults():
    rc = read_config()
    assert rc.get('components', 'types', 'short_text') == (
        'cmsentry.types.datatype:Scalar'
    )
    assert rc.get('commands', 'modules', cast=list) == [
        'cmsentry.types',
        'cmsentry.commands',
        'cmsentry.backends',
    ]


def test_read_config_extra_yaml(tmp_path):
    path = tmp_path / 'extra.yml'
    path.write_text(
        'schema:\n'
        '  max_depth: 2\n'
        'files:\n'
        '  uploaded_by: importer\n'
    )
    rc = read_config(args=[
        f'config={path}',
        'files.uploaded_by=cli',
    ])
    assert rc.get('schema', 'max_depth') == 2
    # Command line options still override extra configuration files.
    assert rc.get('files', 'uploaded_by') == 'cli'
