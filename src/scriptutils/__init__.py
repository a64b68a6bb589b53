# SPDX-FileCopyrightText: 2023 Jeff Epler <jepler@gmail.com>
#
# SPDX-License-Identifier: MIT

from .entrypoint import (
    ProcessContext,
    SymlinkCycleError,
    UnknownScriptError,
    conditional_main,
    default_script_path,
    dispatch,
    is_main,
    iter_links,
    package_root,
    resolve_links,
    script_path,
)
from .environment import (
    ActivationError,
    Activator,
    ProjectDescriptor,
    VirtualEnvActivator,
    activate_and_use,
    activate_dir,
    pop_quiet_flag,
)

__all__ = [
    "ActivationError",
    "Activator",
    "ProcessContext",
    "ProjectDescriptor",
    "SymlinkCycleError",
    "UnknownScriptError",
    "VirtualEnvActivator",
    "activate_and_use",
    "activate_dir",
    "conditional_main",
    "default_script_path",
    "dispatch",
    "is_main",
    "iter_links",
    "package_root",
    "pop_quiet_flag",
    "resolve_links",
    "script_path",
]
