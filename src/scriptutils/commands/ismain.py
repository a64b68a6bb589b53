# SPDX-FileCopyrightText: 2023 Jeff Epler <jepler@gmail.com>
#
# SPDX-License-Identifier: MIT

import os

import click

from ..entrypoint import ProcessContext, is_main


@click.command
@click.option(
    "--program-file",
    "-p",
    required=True,
    help="The file the process was started with",
)
@click.option("--interactive", is_flag=True, help="Treat the session as interactive")
@click.argument("script")
@click.pass_context
def main(
    ctx: click.Context, program_file: str, interactive: bool, script: str
) -> None:
    """Check whether SCRIPT is the program file, after resolving links

    Prints 'true' and exits with status 0 when it is, otherwise prints
    'false' and exits with status 1."""
    context = ProcessContext(program_file, interactive)
    result = is_main(os.path.abspath(script), context)
    click.echo("true" if result else "false")
    ctx.exit(0 if result else 1)


if __name__ == "__main__":
    main()  # pylint: disable=no-value-for-parameter
