#!/usr/bin/env python3
from scriptutils import activate_and_use, conditional_main, script_path

echo = activate_and_use("..", __file__)

if __name__ == "__main__":
    conditional_main(script_path(echo, "echo.py"), echo.main)
