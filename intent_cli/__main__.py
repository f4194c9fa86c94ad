import sys

from intent_cli.commands import main

sys.exit(main())
