"""
serialcalc entry point

    python -m serialcalc --port COM3
"""

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
