"""Entry point for the kiosk Textual app."""

from __future__ import annotations

from kiosk.config import DB_PATH
from kiosk.kiosk_app import KioskApp
from kiosk.logging_config import configure_logging


def main() -> None:
    """Run the Textual application."""
    configure_logging()
    KioskApp(DB_PATH).run()


if __name__ == "__main__":
    main()
