import sys

from guildwatch.launcher import main

sys.exit(main())
