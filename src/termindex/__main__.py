import sys

from termindex.cli import main


sys.exit(main())
