#!/usr/bin/env python
"""
Prusa Proxy - Standalone Entry Point

Run directly:
    python main.py --config ./prusa.yml

Or with environment variables:
    PRUSA_PROXY_PORT=31200 python main.py
"""

import os
import sys

# Ensure package is importable when running directly
if __name__ == '__main__':
    parent_dir = os.path.dirname(os.path.abspath(__file__))
    if parent_dir not in sys.path:
        sys.path.insert(0, parent_dir)

from prusa_proxy.app import main


if __name__ == '__main__':
    main()
