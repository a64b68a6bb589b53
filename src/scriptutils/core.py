# SPDX-FileCopyrightText: 2023 Jeff Epler <jepler@gmail.com>
#
# SPDX-License-Identifier: MIT


import importlib
import importlib.metadata
import logging
import pathlib
import pkgutil
import subprocess
from dataclasses import dataclass, field
from typing import Any, Optional, cast

import click
from rich.logging import RichHandler

from . import commands
from .settings import InvalidSetting, Settings, get_settings


def version_callback(ctx: click.Context, param: click.Parameter, value: None) -> None:
    if not value or ctx.resilient_parsing:
        return

    git_dir = pathlib.Path(__file__).parent.parent.parent / ".git"
    version: str | None = None
    if git_dir.exists():
        try:
            version = subprocess.check_output(
                ["git", f"--git-dir={git_dir}", "describe", "--tags", "--dirty"],
                encoding="utf-8",
                stderr=subprocess.DEVNULL,
            ).strip()
        except (OSError, subprocess.CalledProcessError):
            # untagged checkout, or no git
            pass
    if version is None:
        try:
            version = importlib.metadata.version("scriptutils")
        except importlib.metadata.PackageNotFoundError:
            version = "unknown"
    prog_name = ctx.find_root().info_name
    click.utils.echo(
        f"{prog_name}, version {version}",
        color=ctx.color,
    )
    ctx.exit()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


def set_debug(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if ctx.resilient_parsing:
        return
    level = "DEBUG" if value else ctx.obj.settings.log_level
    try:
        configure_logging(level)
    except ValueError as e:
        raise click.BadParameter(f"Invalid log level {level!r}", param=param) from e


def load_settings_or_fail() -> Settings:
    try:
        return get_settings()
    except InvalidSetting as e:
        raise click.ClickException(str(e)) from e


@dataclass
class Obj:
    settings: Settings = field(default_factory=load_settings_or_fail)


class MyCLI(click.Group):
    def make_context(
        self,
        info_name: Optional[str],
        args: list[str],
        parent: Optional[click.Context] = None,
        **extra: Any,
    ) -> click.Context:
        result = super().make_context(info_name, args, parent, obj=Obj(), **extra)
        return result

    def list_commands(self, ctx: click.Context) -> list[str]:
        rv = []
        for pi in pkgutil.walk_packages(commands.__path__):
            name = pi.name
            if not name.startswith("__"):
                rv.append(name)
        rv.sort()
        return rv

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command:
        try:
            return cast(
                click.Command,
                importlib.import_module("." + cmd_name, commands.__name__).main,
            )
        except ModuleNotFoundError as exc:
            raise click.UsageError(f"Invalid subcommand {cmd_name!r}", ctx) from exc


main = MyCLI(
    help="Tools for packages that double as runnable scripts",
    params=[
        click.Option(
            ("--version",),
            is_flag=True,
            is_eager=True,
            help="Show the version and exit",
            callback=version_callback,
        ),
        click.Option(
            ("--debug",),
            is_flag=True,
            callback=set_debug,
            expose_value=False,
            help="Log diagnostic messages",
        ),
    ],
)
