from __future__ import annotations

import logging
import pathlib
from typing import List
from typing import Optional

from typer import Context as TyperContext
from typer import Option
from typer import Typer
from typer import echo

import cmsentry
from cmsentry.cli import config
from cmsentry.cli import entries
from cmsentry.cli.helpers.typer import add
from cmsentry.core.context import create_context
from cmsentry.logging_config import setup_logging

log = logging.getLogger(__name__)

app = Typer()

add(app, 'config', config.config, short_help="Show current configuration values")
add(app, 'check', entries.check, short_help="Check collection schema")
add(app, 'hydrate', entries.hydrate, short_help="Prepare stored entry data for editing")
add(app, 'prepare', entries.prepare, short_help="Prepare edited entry data for saving")


@app.callback(invoke_without_command=True)
def main(
    ctx: TyperContext,
    option: Optional[List[str]] = Option(None, '-o', '--option', help=(
        "Set configuration option, example: `-o option.name=value`."
    )),
    env_file: Optional[pathlib.Path] = Option(None, '--env-file', help=(
        "Load configuration from a given .env file."
    )),
    version: bool = Option(False, help="Show version number."),
    log_file: Optional[pathlib.Path] = Option(None, '--log-file', help=(
        "Also write log messages to a specified file, rotated daily."
    )),
    log_level: Optional[str] = Option('warning', '--log-level', help=(
        "Log level. Possible levels: fatal, error, warning, info, debug. "
        "Default: warning."
    )),
):
    setup_logging(log_level, log_file)

    log.debug("log file set to: %s", log_file or 'STDERR')
    log.debug("log level set to: %s", log_level)

    ctx.obj = ctx.obj or create_context('cli', args=option, envfile=env_file)
    if version:
        echo(cmsentry.__version__)
