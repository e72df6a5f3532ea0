import sys

from .dump import main

if __name__ == "__main__":
    sys.exit(main())
