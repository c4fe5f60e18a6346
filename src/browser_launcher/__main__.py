import sys

from browser_launcher.cli import main

sys.exit(main())
