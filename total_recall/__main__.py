import sys

from total_recall.cli import main

sys.exit(main())
