# SPDX-FileCopyrightText: 2023 Jeff Epler <jepler@gmail.com>
#
# SPDX-License-Identifier: MIT

import os
import pathlib

import click

from ..core import Obj
from ..entrypoint import default_script_path, script_path


@click.command
@click.option(
    "--package-dir",
    "-d",
    type=click.Path(file_okay=False, path_type=pathlib.Path),
    default=None,
    help="Project directory; by default the module is imported to find it",
)
@click.argument("module")
@click.argument("filename", required=False)
@click.pass_obj
def main(
    obj: Obj, package_dir: pathlib.Path | None, module: str, filename: str | None
) -> None:
    """Print the path of the script file belonging to MODULE"""
    scripts_dir = obj.settings.scripts_dir
    if package_dir is not None:
        if filename is None:
            click.echo(default_script_path(package_dir, module, scripts_dir))
        else:
            click.echo(os.path.abspath(package_dir / scripts_dir / filename))
        return

    try:
        click.echo(script_path(module, filename, scripts_dir))
    except ImportError as e:
        raise click.BadParameter(str(e), param_hint="MODULE") from e
    except ValueError as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    main()  # pylint: disable=no-value-for-parameter
