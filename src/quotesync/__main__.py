import sys

from quotesync.cli import main

sys.exit(main())
