import sys

from cardboard.cli import main

sys.exit(main())
