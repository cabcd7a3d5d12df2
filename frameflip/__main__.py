import sys

from frameflip.cli import main

sys.exit(main())
