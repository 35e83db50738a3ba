import sys

from py_mysql_probe.cli import main

sys.exit(main())
