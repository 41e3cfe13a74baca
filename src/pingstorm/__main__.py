import sys

from pingstorm.cli import main

sys.exit(main())
