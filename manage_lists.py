#!/usr/bin/env python3
"""
Listarr - curate watch-lists and sync them into Radarr and Sonarr.

Usage:
    python manage_lists.py new classics
    python manage_lists.py add classics imdb:tt0111161
    python manage_lists.py sync classics radarr
"""

import sys

from listarr.cli import main

if __name__ == '__main__':
    sys.exit(main())
