"""
Entry point for running nsflood as a module.

Usage: python -m nsflood [OPTIONS] NAMESERVER HOST
"""

from .cli import main

if __name__ == "__main__":
    main()
