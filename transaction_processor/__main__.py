"""Allow running as `python -m transaction_processor`"""

import sys

from .cli import main

sys.exit(main())
