import sys

from .ingestion.run import main

sys.exit(main())
