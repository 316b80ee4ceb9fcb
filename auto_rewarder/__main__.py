"""Allow running the package as a module: python -m auto_rewarder"""

import sys

from auto_rewarder.cli import main

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
