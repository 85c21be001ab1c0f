#!/usr/bin/env python3
"""
Entry point for running the package as: python -m sqldump
"""

from .main import main

if __name__ == '__main__':
    main()
