import sys

from nosscan.cli import main

sys.exit(main())
