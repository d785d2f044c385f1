import asyncio
import pathlib
from typing import Optional

from typer import Argument
from typer import Context as TyperContext
from typer import Option
from typer import echo

from cmsentry.cli.helpers.data import attach_local_files
from cmsentry.cli.helpers.data import dump_json
from cmsentry.cli.helpers.data import read_json
from cmsentry.cli.helpers.errors import cli_base_error
from cmsentry.cli.helpers.errors import cli_error
from cmsentry.commands.transform import hydrate_for_display
from cmsentry.commands.transform import prepare_for_save
from cmsentry.components import Collection
from cmsentry.components import EntryRecord
from cmsentry.components import Schema
from cmsentry.exceptions import BaseError
from cmsentry.types.datatype import NestedSchema
from cmsentry.types.schema import load_collection_file

SCHEMA_HELP = "Collection schema file (YAML or JSON)"


def _load_collection(ctx: TyperContext, schema: pathlib.Path, project: Optional[str]) -> Collection:
    context = ctx.obj
    try:
        return load_collection_file(context, schema, project=project)
    except BaseError as e:
        cli_base_error(e)


def _print_fields(schema: Schema, indent: int = 0):
    for field in schema.fields.values():
        echo(f'{"  " * indent}{field.key}: {field.type} ({field.dtype.kind.value})')
        if isinstance(field.dtype, NestedSchema):
            _print_fields(field.dtype.schema, indent + 1)


def check(
    ctx: TyperContext,
    schema: pathlib.Path = Argument(..., exists=True, dir_okay=False, help=SCHEMA_HELP),
):
    """Load collection schema and show its fields"""
    collection = _load_collection(ctx, schema, None)
    _print_fields(collection.schema)
    echo("OK")


def hydrate(
    ctx: TyperContext,
    schema: pathlib.Path = Argument(..., exists=True, dir_okay=False, help=SCHEMA_HELP),
    entry: pathlib.Path = Argument(..., exists=True, dir_okay=False, help=(
        "Stored entry or stored entry data as a JSON file"
    )),
    project: Optional[str] = Option(None, '-p', '--project', help=(
        "Project used as file storage scope"
    )),
):
    """Show stored entry data prepared for editing"""
    context = ctx.obj
    collection = _load_collection(ctx, schema, project)
    data = read_json(entry)
    if not isinstance(data, dict):
        cli_error(f"{entry} must contain a JSON object.")
    if 'collectionId' in data:
        try:
            data = EntryRecord.from_dict(data)
        except KeyError as e:
            cli_error(f"{entry} is not a valid entry, missing {e.args[0]!r} key.")
    try:
        result = asyncio.run(hydrate_for_display(context, data, collection.schema))
    except BaseError as e:
        cli_base_error(e)
    else:
        echo(dump_json(result))


def prepare(
    ctx: TyperContext,
    schema: pathlib.Path = Argument(..., exists=True, dir_okay=False, help=SCHEMA_HELP),
    data: pathlib.Path = Argument(..., exists=True, dir_okay=False, help=(
        "Edited entry data as a JSON file, files to upload are given as "
        "{\"file\": \"path/to/file\"}, relative to the data file"
    )),
    project: Optional[str] = Option(None, '-p', '--project', help=(
        "Project used as file storage scope"
    )),
):
    """Upload pending files and show entry data ready to be stored"""
    context = ctx.obj
    collection = _load_collection(ctx, schema, project)
    tree = read_json(data)
    if not isinstance(tree, dict):
        cli_error(f"{data} must contain a JSON object.")
    try:
        tree = attach_local_files(collection.schema, tree, data.parent)
    except OSError as e:
        cli_error(f"Can't read file to upload: {e}")
    try:
        result = asyncio.run(prepare_for_save(context, tree, collection.schema))
    except BaseError as e:
        cli_base_error(e)
    else:
        echo(dump_json(result))
