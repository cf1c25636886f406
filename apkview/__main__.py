import sys

from apkview.cli.controller import main

if __name__ == "__main__":
    sys.exit(main())
