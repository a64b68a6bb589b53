#!/usr/bin/env python3
# SPDX-FileCopyrightText: 2023 Jeff Epler <jepler@gmail.com>
#
# SPDX-License-Identifier: MIT

# scriptutils-dev.py - run the scriptutils command line from a source checkout

import pathlib
import sys

# Ensure the 'src' directory is on the system path so we can import 'scriptutils'
project_root = pathlib.Path(__file__).resolve().parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

if __name__ == "__main__":
    # pylint: disable=import-error,no-name-in-module
    from scriptutils.core import main

    main()
else:
    raise ImportError("'scriptutils-dev.py' is meant for direct execution, not for import.")
