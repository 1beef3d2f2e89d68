"""Allow running as: python -m swapsim"""

import sys

from swapsim.main import main

if __name__ == "__main__":
    sys.exit(main())
