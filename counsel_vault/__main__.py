import sys

from counsel_vault.cli import main

sys.exit(main())
