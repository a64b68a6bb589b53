#!/usr/bin/env python3
from scriptutils import activate_and_use

multiple = activate_and_use("..", __file__)

if __name__ == "__main__":
    multiple.main()
