"""
Run a CHIP-8 ROM in a pygame window.

    python main.py path/to/rom.ch8 [--debug]
"""

import sys

from chipjax.driver import main

if __name__ == "__main__":
    sys.exit(main())
