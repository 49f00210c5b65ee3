#!/usr/bin/env python3
"""
Transaction Processor Entry Point

Usage: python run.py transactions.csv > accounts.csv
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from transaction_processor.cli import main


if __name__ == "__main__":
    sys.exit(main())
