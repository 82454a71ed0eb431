"""Allow ``python -m ludwig`` to behave like the CLI entry point."""

from ludwig.cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
