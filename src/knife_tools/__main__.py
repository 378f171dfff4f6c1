import sys

from knife_tools.cli import main

if __name__ == "__main__":
    sys.exit(main())
