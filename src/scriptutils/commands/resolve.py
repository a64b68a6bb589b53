# SPDX-FileCopyrightText: 2023 Jeff Epler <jepler@gmail.com>
#
# SPDX-License-Identifier: MIT

import click

from ..core import Obj
from ..entrypoint import SymlinkCycleError, iter_links, resolve_links


@click.command
@click.option("--chain", is_flag=True, help="Print every link followed")
@click.option("--max-hops", type=click.IntRange(min=0), default=None)
@click.argument("paths", nargs=-1, required=True)
@click.pass_obj
def main(obj: Obj, chain: bool, max_hops: int | None, paths: tuple[str, ...]) -> None:
    """Follow symbolic links to the file they point at"""
    if max_hops is None:
        max_hops = obj.settings.max_hops
    for path in paths:
        try:
            if chain:
                hops = [path, *iter_links(path, max_hops)]
                click.echo(" -> ".join(hops))
            else:
                click.echo(resolve_links(path, max_hops))
        except SymlinkCycleError as e:
            raise click.ClickException(f"{path}: {e.strerror}") from e
        except OSError as e:
            raise click.ClickException(f"{path}: {e}") from e


if __name__ == "__main__":
    main()  # pylint: disable=no-value-for-parameter
