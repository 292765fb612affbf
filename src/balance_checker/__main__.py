"""Entry point for running as module: python -m balance_checker"""

from balance_checker.cli import run

if __name__ == "__main__":
    run()
