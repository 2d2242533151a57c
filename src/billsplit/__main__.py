import sys

from billsplit.cli import main

sys.exit(main())
