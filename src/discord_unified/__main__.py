import sys

from discord_unified.cli import main

sys.exit(main())
