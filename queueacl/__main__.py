import sys

from .server import cli_main

sys.exit(cli_main())
