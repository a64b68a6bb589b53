# SPDX-FileCopyrightText: 2023 Jeff Epler <jepler@gmail.com>
#
# SPDX-License-Identifier: MIT

from dataclasses import fields

import click
from simple_parsing.docstring import get_attribute_docstring

from ..core import Obj
from ..settings import ENV_PREFIX, Settings, settings_file


def format_settings_help(settings: Settings, formatter: click.HelpFormatter) -> None:
    with formatter.section("Settings"):
        rows = []
        for f in fields(settings):
            value = getattr(settings, f.name)
            doc = get_attribute_docstring(Settings, f.name).docstring_below or ""
            if doc:
                doc += " "
            doc += f"(Current: {value!r}, default: {f.default!r})"
            rows.append((f"{f.name}: {f.type.__name__}", doc))
        formatter.write_dl(rows)
    with formatter.section("Sources"):
        formatter.write_dl(
            [
                ("file", str(settings_file)),
                ("environment", f"{ENV_PREFIX}<NAME>, e.g. {ENV_PREFIX}MAX_HOPS"),
            ]
        )


@click.command
@click.pass_context
def main(ctx: click.Context) -> None:
    """Show the effective settings"""
    obj: Obj = ctx.obj
    formatter = ctx.make_formatter()
    format_settings_help(obj.settings, formatter)
    click.echo(formatter.getvalue().rstrip("\n"))


if __name__ == "__main__":
    main()  # pylint: disable=no-value-for-parameter
