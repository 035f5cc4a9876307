#!/usr/bin/env python3
"""
godot2video.__main__ - Entry point for `python -m godot2video` and console scripts
"""

import sys

from .main import main as script_main


def main():
    """Console script entry point"""
    return script_main(sys.argv[1:])


if __name__ == "__main__":
    sys.exit(main())
