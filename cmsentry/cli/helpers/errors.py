import json

from typer import Exit
from typer import echo

from cmsentry.exceptions import BaseError
from cmsentry.exceptions import error_response


def cli_error(message: str):
    echo(message, err=True)
    raise Exit(code=1)


def cli_base_error(error: BaseError):
    cli_error(json.dumps(error_response(error), indent='  ', ensure_ascii=False, default=str))
