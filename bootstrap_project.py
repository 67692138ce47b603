"""Minimal launcher for the bootstrap application.

Its single responsibility is to delegate to
``djdock.setup.app_runner.entry_point``; everything else lives in the
package.

Usage:
    python bootstrap_project.py [--lang en|sv] [--base-dir DIR] [--no-launch]

"""

from __future__ import annotations


def entry_point(argv: list[str] | None = None) -> None:
    """Run the bootstrap application.

    The runner is imported inside the function to avoid importing the
    whole application at module import time.
    """
    from djdock.setup.app_runner import entry_point as app_entry_point

    app_entry_point(argv)


if __name__ == "__main__":
    entry_point()
