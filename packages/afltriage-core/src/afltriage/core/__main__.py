import sys

from afltriage.core.cli import main

sys.exit(main())
