"""Main entry point for the Padmasambhava Trips backend."""

from padmasambhava_trips.cli import serve


def main():
    """Main function for CLI entry point."""
    serve()


if __name__ == "__main__":
    main()
