"""
Main entry point for factorbugs when run as a module.
Allows execution via: python -m factorbugs
"""

from factorbugs.cli.main import main as cli_main


def main():
    """Main entry point for the factorbugs application."""
    cli_main()


if __name__ == "__main__":
    main()
