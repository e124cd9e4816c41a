#!/usr/bin/env python3
"""
Register Components Script
Usage: python scripts/register_components.py
"""

import sys
import os

# Add the backend directory to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from padma_backend.scripts.register_components import run

if __name__ == "__main__":
    print("Registering Padma components...")
    run()
