#!/usr/bin/env python3
"""
Main entry point for the archvm installer.
"""
from archvm_installer.main import main

if __name__ == "__main__":
    raise SystemExit(main())
