"""CLI shim -- delegates to manuskrip.cli.main().

Usage:
    python main.py
    python main.py --port 9000 --auth-mode local-server
"""

from manuskrip.cli import main

if __name__ == "__main__":
    main()
