# SPDX-FileCopyrightText: 2023 Jeff Epler <jepler@gmail.com>
#
# SPDX-License-Identifier: MIT

"""Print the arguments, like echo(1)

Run ``scripts/echo.py`` (or a symlink to it) to use this as a program;
``import echo`` to use it as a library."""


def echo(args: list[str]) -> None:
    print(" ".join(args))


def main(args: list[str]) -> None:
    echo(args)
