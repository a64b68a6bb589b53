# SPDX-FileCopyrightText: 2023 Jeff Epler <jepler@gmail.com>
#
# SPDX-License-Identifier: MIT

"""Decide whether the running process was started from a given script file

A package that doubles as a script calls `conditional_main` from its script
file.  `main` runs only when that file (or a symbolic link to it) is what the
interpreter was started with, never when the package is imported as a
library or used from an interactive session.
"""

import errno
import importlib
import logging
import os
import pathlib
import stat
import sys
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import ModuleType
from typing import Any, Callable, Optional, Union

from .settings import get_settings

logger = logging.getLogger(__name__)

StrPath = Union[str, "os.PathLike[str]"]
MainFunction = Callable[[list[str]], Any]

PROJECT_MARKERS = ("pyproject.toml", "setup.py", "setup.cfg")

# argv[0] values that mean no script file was launched
NOT_A_PROGRAM_FILE = ("", "-c", "-")


class SymlinkCycleError(OSError):
    def __init__(self, path: str, max_hops: int):
        super().__init__(
            errno.ELOOP,
            f"Too many levels of symbolic links (more than {max_hops})",
            path,
        )
        self.max_hops = max_hops


class UnknownScriptError(RuntimeError):
    def __init__(self, program_file: Optional[str]):
        super().__init__(f"Unknown script: {program_file}")
        self.program_file = program_file


def _is_link(path: str) -> bool:
    try:
        st = os.lstat(path)
    except (FileNotFoundError, NotADirectoryError):
        return False
    return stat.S_ISLNK(st.st_mode)


def _follow(link: str) -> str:
    target = os.readlink(link)
    directory = os.path.dirname(link)
    if os.pardir in pathlib.PurePath(target).parts:
        # ".." steps out of the real directory, not out of a symlink to it
        real = os.path.realpath(directory)
        if real != os.path.abspath(directory):
            directory = real
    return os.path.abspath(os.path.join(directory, target))


def iter_links(path: StrPath, max_hops: Optional[int] = None) -> Iterator[str]:
    """Yield each target in the chain of symbolic links starting at `path`

    `path` itself is not yielded.  Relative link targets are taken relative
    to the directory holding the link."""
    if max_hops is None:
        max_hops = get_settings().max_hops
    start = path = os.fspath(path)
    hops = 0
    while _is_link(path):
        if hops >= max_hops:
            raise SymlinkCycleError(start, max_hops)
        path = _follow(path)
        hops += 1
        logger.debug("link %d of %s: %s", hops, start, path)
        yield path


def resolve_links(path: StrPath, max_hops: Optional[int] = None) -> str:
    """Follow symbolic links until reaching a path that is not a link

    A path that is not a link, including one that does not exist, comes back
    unchanged.  Parent directories are not de-referenced.  More than
    `max_hops` links raises `SymlinkCycleError`."""
    result = os.fspath(path)
    for result in iter_links(path, max_hops):
        pass
    return result


@dataclass(frozen=True)
class ProcessContext:
    """What the hosting interpreter says about how it was started"""

    program_file: Optional[str]
    interactive: bool = False
    args: list[str] = field(default_factory=list)

    @classmethod
    def from_process(cls) -> "ProcessContext":
        argv = sys.argv or [""]
        program_file: Optional[str] = argv[0]
        if program_file in NOT_A_PROGRAM_FILE:
            program_file = None
        interactive = (
            program_file is None
            or bool(sys.flags.interactive)
            or hasattr(sys, "ps1")
        )
        return cls(program_file, interactive, list(argv[1:]))


def is_main(candidate: StrPath, context: Optional[ProcessContext] = None) -> bool:
    """Return True if `candidate` is the file the process was started with

    The launched file is made absolute and its symbolic links are resolved
    before the comparison.  Interactive sessions never count."""
    if context is None:
        context = ProcessContext.from_process()
    logger.debug("is_main: %r", context)
    if context.interactive or context.program_file is None:
        return False
    program_file = resolve_links(os.path.abspath(context.program_file))
    candidate = os.fspath(candidate)
    logger.debug("is_main: candidate=%s program_file=%s", candidate, program_file)
    return candidate == program_file


def conditional_main(
    candidate: StrPath,
    main_fn: MainFunction,
    context: Optional[ProcessContext] = None,
    args: Optional[list[str]] = None,
) -> Any:
    if context is None:
        context = ProcessContext.from_process()
    if not is_main(candidate, context):
        return None
    return main_fn(context.args if args is None else args)


def dispatch(
    scripts: Mapping[StrPath, MainFunction],
    context: Optional[ProcessContext] = None,
    args: Optional[list[str]] = None,
    strict: bool = False,
) -> Any:
    """Run the main function of whichever script the process was started with

    With no match this returns None, or raises `UnknownScriptError` when
    `strict` is set and the session is not interactive."""
    if context is None:
        context = ProcessContext.from_process()
    for candidate, main_fn in scripts.items():
        if is_main(candidate, context):
            return main_fn(context.args if args is None else args)
    if strict and not context.interactive:
        raise UnknownScriptError(context.program_file)
    return None


def default_script_path(
    package_dir: StrPath,
    module_name: str,
    scripts_dir: Optional[str] = None,
    suffix: Optional[str] = None,
) -> str:
    settings = get_settings()
    if scripts_dir is None:
        scripts_dir = settings.scripts_dir
    if suffix is None:
        suffix = settings.script_suffix
    filename = module_name.rpartition(".")[2].lower() + suffix
    return os.path.abspath(os.path.join(package_dir, scripts_dir, filename))


def _as_module(module: Union[ModuleType, str]) -> ModuleType:
    if isinstance(module, str):
        return importlib.import_module(module)
    return module


def package_root(module: Union[ModuleType, str]) -> str:
    """Directory of the project containing `module`

    This is the nearest directory with a pyproject.toml, setup.py or
    setup.cfg, searching no higher than the directory above the one holding
    the module (or package), which is the result when none is found."""
    module = _as_module(module)
    module_file = getattr(module, "__file__", None)
    if module_file is None:
        raise ValueError(f"{module.__name__} is not loaded from a file")
    directory = base = os.path.dirname(os.path.abspath(module_file))
    if hasattr(module, "__path__"):
        base = os.path.dirname(base)
    fallback = os.path.dirname(base)
    while True:
        if any(
            os.path.exists(os.path.join(directory, marker))
            for marker in PROJECT_MARKERS
        ):
            return directory
        if directory == fallback:
            return fallback
        directory = os.path.dirname(directory)


def script_path(
    module: Union[ModuleType, str],
    filename: Optional[str] = None,
    scripts_dir: Optional[str] = None,
) -> str:
    """Absolute path of a script file in the scripts directory of `module`'s project

    The default file name is the lowercased module name plus the configured
    suffix."""
    module = _as_module(module)
    root = package_root(module)
    if filename is None:
        return default_script_path(root, module.__name__, scripts_dir)
    if scripts_dir is None:
        scripts_dir = get_settings().scripts_dir
    return os.path.abspath(os.path.join(root, scripts_dir, filename))
