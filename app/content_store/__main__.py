"""Content store CLI interface.

Examples:
  # List visible content for the home page
  python -m app.content_store list --page home

  # Show a key in English
  python -m app.content_store get heroTitle --lang en --default Welcome

  # Edit the English rendition of a bilingual title
  python -m app.content_store set heroTitle "Welcome home" --lang en

  # Back up and restore everything
  python -m app.content_store export -o content-backup.json
  python -m app.content_store import content-backup.json
"""

from app.content_store.cli import cli
from app.core.logging import configure_logging


def main():
    """Main CLI entry point."""
    configure_logging(json_logs=False)
    cli(prog_name="python -m app.content_store")


if __name__ == "__main__":
    main()
