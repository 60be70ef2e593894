import sys

from guildkeeper.cli import main

sys.exit(main())
