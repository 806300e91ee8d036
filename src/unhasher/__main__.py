"""Main entry point for the unhasher package."""
from unhasher.cli import cli


def main():
    """Main entry point function."""
    cli()


if __name__ == "__main__":
    main()
