#!/usr/bin/env python3
"""
restmine - Liga branches do git a tickets do Redmine.

Ponto de entrada principal do aplicativo.
"""

import sys
from src.restmine.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
