# SPDX-FileCopyrightText: 2023 Jeff Epler <jepler@gmail.com>
#
# SPDX-License-Identifier: MIT

"""Activate the project a script belongs to

A script kept in ``<project>/scripts`` (and possibly symlinked into
``~/bin``) calls `activate_and_use` so that the project's own package and its
virtual environment become importable, wherever the script was run from::

    #!/usr/bin/env python3
    from scriptutils import activate_and_use, conditional_main, script_path

    echo = activate_and_use("..", __file__)

    if __name__ == "__main__":
        conditional_main(script_path(echo), echo.main)

If the first script argument is ``-q`` the activation message is suppressed
and the flag is removed before ``main`` sees the arguments.
"""

import glob
import importlib
import logging
import os
import site
import subprocess
import sys
import tomllib
from dataclasses import dataclass
from types import ModuleType
from typing import Optional

import rich.console
from typing_extensions import Protocol

from .entrypoint import ProcessContext, StrPath, resolve_links
from .settings import get_settings

logger = logging.getLogger(__name__)


class ActivationError(RuntimeError):
    pass


@dataclass(frozen=True)
class ProjectDescriptor:
    """The project found in an activated directory"""

    name: str
    path: str
    version: Optional[str] = None

    @property
    def import_name(self) -> str:
        return self.name.lower().replace("-", "_").replace(".", "_")


def read_project(directory: StrPath) -> ProjectDescriptor:
    directory = os.path.abspath(directory)
    pyproject = os.path.join(directory, "pyproject.toml")
    project = {}
    if os.path.exists(pyproject):
        with open(pyproject, "rb") as f:
            try:
                project = tomllib.load(f).get("project", {})
            except tomllib.TOMLDecodeError as e:
                raise ActivationError(f"{pyproject}: {e}") from e
    name = project.get("name") or os.path.basename(directory)
    return ProjectDescriptor(name, directory, project.get("version"))


class Activator(Protocol):
    def activate(self, directory: str, quiet: bool) -> ProjectDescriptor:
        """Make the project in `directory` importable and describe it"""

    def instantiate(self, directory: str) -> None:
        """Install the declared dependencies of the project in `directory`"""


class VirtualEnvActivator:
    """Activate projects laid out with an optional src/ and virtual environment"""

    def __init__(
        self,
        venv_name: Optional[str] = None,
        console: Optional[rich.console.Console] = None,
    ) -> None:
        self.venv_name = venv_name or get_settings().venv_name
        self.console = console or rich.console.Console(stderr=True)

    def venv_path(self, directory: str) -> str:
        return os.path.join(directory, self.venv_name)

    def site_packages(self, directory: str) -> list[str]:
        venv = self.venv_path(directory)
        if os.name == "nt":
            candidates = [os.path.join(venv, "Lib", "site-packages")]
        else:
            candidates = glob.glob(os.path.join(venv, "lib", "python*", "site-packages"))
        return sorted(p for p in candidates if os.path.isdir(p))

    def python(self, directory: str) -> str:
        venv = self.venv_path(directory)
        if os.name == "nt":
            candidate = os.path.join(venv, "Scripts", "python.exe")
        else:
            candidate = os.path.join(venv, "bin", "python")
        return candidate if os.path.exists(candidate) else sys.executable

    def add_site(self, directory: str) -> None:
        for sitedir in self.site_packages(directory):
            logger.debug("adding site directory %s", sitedir)
            site.addsitedir(sitedir)

    def activate(self, directory: str, quiet: bool) -> ProjectDescriptor:
        directory = os.path.abspath(directory)
        if not os.path.isdir(directory):
            raise ActivationError(f"Project directory {directory} does not exist")
        if not quiet:
            self.console.print(
                f"  [bold green]Activating[/] project at `{directory}`",
                highlight=False,
                soft_wrap=True,
            )

        src = os.path.join(directory, "src")
        import_root = src if os.path.isdir(src) else directory
        # ahead of the script's own directory, which may hold a same-named script
        if import_root in sys.path:
            sys.path.remove(import_root)
        sys.path.insert(0, import_root)
        self.add_site(directory)
        return read_project(directory)

    def instantiate(self, directory: str) -> None:
        command = [self.python(directory), "-m", "pip", "install", "-e", directory]
        logger.debug("instantiating with %s", command)
        subprocess.check_call(command)
        self.add_site(directory)
        importlib.invalidate_caches()


def pop_quiet_flag(
    argv: list[str], always_quiet: bool = False, popq: bool = True
) -> bool:
    """Return whether activation should be quiet, consuming a leading quiet flag

    `argv` is a full argument vector; ``argv[0]`` is the program."""
    if always_quiet:
        return True
    quiet_flag = get_settings().quiet_flag
    if len(argv) > 1 and argv[1] == quiet_flag:
        if popq:
            del argv[1]
        return True
    return False


def activate_dir(
    relative_dir: str = "..",
    script_file: Optional[StrPath] = None,
    always_quiet: Optional[bool] = None,
    popq: bool = True,
    *,
    argv: Optional[list[str]] = None,
    activator: Optional[Activator] = None,
) -> ProjectDescriptor:
    """Activate a project directory given relative to the directory of `script_file`

    The default activates the parent of the directory holding the script,
    after following symbolic links to the script, so a script in
    ``<project>/scripts`` activates ``<project>``.  Use ``"."`` when the
    script sits beside pyproject.toml.

    `script_file` defaults to the file the process was started with and
    `argv` to ``sys.argv``, which is modified in place when the quiet flag
    is consumed."""
    if argv is None:
        argv = sys.argv
    if always_quiet is None:
        always_quiet = get_settings().always_quiet
    if script_file is None:
        script_file = ProcessContext.from_process().program_file
        if script_file is None:
            raise ActivationError("No script file was given and none was launched")
    if activator is None:
        activator = VirtualEnvActivator()

    quiet = pop_quiet_flag(argv, always_quiet, popq)
    script_file = resolve_links(os.path.abspath(script_file))
    project_dir = os.path.normpath(
        os.path.join(os.path.dirname(script_file), relative_dir)
    )
    logger.debug("activating %s for %s", project_dir, script_file)
    return activator.activate(project_dir, quiet)


def activate_and_use(
    relative_dir: str = "..",
    script_file: Optional[StrPath] = None,
    always_quiet: Optional[bool] = None,
    popq: bool = True,
    *,
    argv: Optional[list[str]] = None,
    activator: Optional[Activator] = None,
) -> ModuleType:
    """Activate a project directory like `activate_dir` and import its package

    If the import fails the project is instantiated once and the import is
    tried again; a second failure propagates."""
    if activator is None:
        activator = VirtualEnvActivator()
    project = activate_dir(
        relative_dir,
        script_file,
        always_quiet,
        popq,
        argv=argv,
        activator=activator,
    )
    try:
        return importlib.import_module(project.import_name)
    except ImportError as e:
        logger.debug("importing %s failed (%s), instantiating", project.import_name, e)
    activator.instantiate(project.path)
    return importlib.import_module(project.import_name)
