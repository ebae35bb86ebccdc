"""Allow running the CLI with ``python -m certmatch``."""

from certmatch.cli import app

if __name__ == "__main__":
    app()
