"""Module entry point: python -m timeline_ics ..."""

import sys

from timeline_ics.cli import main


if __name__ == "__main__":
    sys.exit(main())
