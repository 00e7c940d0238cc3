import sys

from termresurrect.cli import main

sys.exit(main())
