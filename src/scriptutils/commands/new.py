# SPDX-FileCopyrightText: 2023 Jeff Epler <jepler@gmail.com>
#
# SPDX-License-Identifier: MIT

import os
import pathlib
import stat

import click
import rich
from rich.markup import escape

from ..core import Obj
from ..environment import ActivationError, read_project

TEMPLATE = '''\
#!/usr/bin/env python3
from scriptutils import activate_and_use, conditional_main, script_path

{module} = activate_and_use({relative_dir!r}, __file__)

if __name__ == "__main__":
    conditional_main(script_path({module}, {filename!r}), {module}.main)
'''


def render_script(module: str, filename: str, relative_dir: str = "..") -> str:
    return TEMPLATE.format(module=module, filename=filename, relative_dir=relative_dir)


def make_executable(path: pathlib.Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


@click.command
@click.option("--name", "-n", default=None, help="Script name (default: the package name)")
@click.option(
    "--relative-dir",
    default="..",
    show_default=True,
    help="Project directory relative to the script's directory",
)
@click.option(
    "--link-into",
    "-l",
    type=click.Path(file_okay=False, exists=True, path_type=pathlib.Path),
    default=None,
    help="Also symlink the script into this directory, e.g. ~/bin",
)
@click.option("--force", "-f", is_flag=True, help="Overwrite existing files")
@click.argument(
    "project_dir",
    type=click.Path(file_okay=False, exists=True, path_type=pathlib.Path),
)
@click.pass_obj
def main(
    obj: Obj,
    name: str | None,
    relative_dir: str,
    link_into: pathlib.Path | None,
    force: bool,
    project_dir: pathlib.Path,
) -> None:
    """Create a script that runs the main function of the package in PROJECT_DIR

    The package must define main(args)."""
    console = rich.get_console()
    try:
        project = read_project(project_dir)
    except ActivationError as e:
        raise click.ClickException(str(e)) from e

    filename = (name or project.import_name).lower() + obj.settings.script_suffix
    scripts = pathlib.Path(project.path) / obj.settings.scripts_dir
    script = scripts / filename
    if script.exists() and not force:
        raise click.ClickException(f"{script} already exists (use --force to replace it)")

    scripts.mkdir(parents=True, exist_ok=True)
    script.write_text(
        render_script(project.import_name, filename, relative_dir), encoding="utf-8"
    )
    make_executable(script)
    console.print(f"Wrote [bold]{escape(str(script))}[/]")

    if link_into is not None:
        link = link_into / filename
        if os.path.lexists(link):
            if not force:
                raise click.ClickException(
                    f"{link} already exists (use --force to replace it)"
                )
            link.unlink()
        link.symlink_to(script)
        console.print(f" -> {escape(str(link))}")


if __name__ == "__main__":
    main()  # pylint: disable=no-value-for-parameter
