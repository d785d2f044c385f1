import sys
from typing import List
from typing import Optional

from typer import Argument
from typer import Context as TyperContext
from typer import Option

from cmsentry.core.config import KeyFormat


def config(
    ctx: TyperContext,
    name: Optional[List[str]] = Argument(None, help=(
        "Show only options starting with given names, example: `backends`."
    )),
    fmt: KeyFormat = Option(KeyFormat.cfg, '-f', '--format', help=(
        "Option name format, `env` shows environment variable names."
    )),
):
    """Show current configuration values"""
    context = ctx.obj
    rc = context.get('rc')
    rc.dump(*(name or []), fmt=fmt, file=sys.stdout)
