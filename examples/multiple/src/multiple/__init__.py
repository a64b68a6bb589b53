# SPDX-FileCopyrightText: 2023 Jeff Epler <jepler@gmail.com>
#
# SPDX-License-Identifier: MIT

"""One package, several scripts

``scripts/greet.py`` and ``scripts/shout.py`` both load this package;
`main` picks the function to run from the script that was launched."""

from scriptutils import dispatch, script_path


def greet(args: list[str]) -> None:
    for name in args or ["world"]:
        print(f"Hello, {name}!")


def shout(args: list[str]) -> None:
    print(" ".join(args).upper())


def main() -> None:
    dispatch(
        {
            script_path(__name__, "greet.py"): greet,
            script_path(__name__, "shout.py"): shout,
        },
        strict=True,
    )
