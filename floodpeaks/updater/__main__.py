import sys

from floodpeaks.updater.cli import main

sys.exit(main())
