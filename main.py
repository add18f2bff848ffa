#!/usr/bin/env python3
"""
Main entry point for the subtitle catalog engine
"""

from subtitle_catalog.main import run

if __name__ == "__main__":
    run()
