"""Allow ``python -m cheffy`` to run the CLI."""

from cheffy.cli.main import main

if __name__ == "__main__":
    main()
