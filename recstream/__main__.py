import sys

from recstream.cli import main

raise SystemExit(main(sys.argv[1:]))
