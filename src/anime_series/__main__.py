import sys

from anime_series.cli import main

sys.exit(main())
