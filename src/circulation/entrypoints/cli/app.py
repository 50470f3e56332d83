"""Access to the wired application from inside CLI commands.

The container is built on first use and cached on the root Click context, so
commands that never touch the library (``--help``, ``db ...``) do not need a
database URL. Tests may pass a ready container with
``CliRunner.invoke(..., obj={"app": container})``.
"""

from __future__ import annotations

import click

from circulation.bootstrap import AppContainer, bootstrap

APP_KEY = "app"


def get_app(ctx: click.Context) -> AppContainer:
    """Return the application container for this invocation."""
    obj = ctx.find_root().ensure_object(dict)
    if (app := obj.get(APP_KEY)) is None:
        app = obj[APP_KEY] = bootstrap()
    return app
