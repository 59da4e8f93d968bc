"""Main entry point for sentimeter."""

from sentimeter.cli import main as cli_main


def main():
    """Main entry point - delegates to the CLI."""
    cli_main()


if __name__ == "__main__":
    main()
