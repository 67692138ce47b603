"""Entrypoint and CLI helpers for the bootstrap application.

This module provides logging configuration, CLI parsing and the top-level
``run``/``entry_point`` functions. It composes the configuration loader
and the pipeline orchestrator and maps the outcome to a process exit
status: 0 on success, 1 on any checked failure, 130 when the operator
interrupts the interactive superuser prompt.

Examples
--------
>>> import djdock.setup.app_runner as runner
>>> args = runner.parse_cli_args(['--lang', 'en', '--no-launch'])
>>> runner.run(args)  # doctest: +SKIP
0
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

import djdock.setup.i18n as i18n
from djdock.bootstrap_config import load_config
from djdock.config import LOG_DIR, LOG_FILENAME, LOG_FORMAT
from djdock.exceptions import AppError
from djdock.setup.pipeline import orchestrator
from djdock.setup.ui.basic import ui_error, ui_header

logger = logging.getLogger(__name__)


def _log_dir_allowed(base: Path | None) -> bool:
    """Return False when ``LOG_DIR`` would land inside the base path."""
    if base is None:
        return True
    return not LOG_DIR.resolve().is_relative_to(base.resolve())


def configure_logging(
    log_level: str = "INFO", enable_file: bool = True, base: Path | None = None
) -> None:
    r"""Configure root logging for a bootstrap run.

    Installs a stream handler and, unless disabled, a file handler at
    ``LOG_DIR / LOG_FILENAME``. The file handler is skipped when ``LOG_DIR``
    lies inside ``base``, so nothing is ever written under the
    bootstrapped base path.

    Parameters
    ----------
    log_level : str, optional
        The logging level (e.g., "INFO", "DEBUG"). Defaults to "INFO".
    enable_file : bool, optional
        Whether to also write to the log file. The ``DISABLE_FILE_LOGS``
        environment variable turns it off regardless.
    base : Path or None, optional
        Base path of the run, when known.
    """
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if enable_file and not os.environ.get("DISABLE_FILE_LOGS") and _log_dir_allowed(base):
        try:
            LOG_DIR.mkdir(exist_ok=True)
            handlers.insert(0, logging.FileHandler(LOG_DIR / LOG_FILENAME, mode="a"))
        except OSError as error:
            sys.stderr.write(f"Could not open log file in {LOG_DIR}: {error}\n")
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def parse_cli_args(argv: list[str] | None = None) -> argparse.Namespace:
    r"""Parse command-line arguments for the bootstrap application.

    Parameters
    ----------
    argv : list of str or None, optional
        List of argument strings to parse (as from ``sys.argv[1:]``).
        If None, defaults to ``sys.argv``.

    Returns
    -------
    argparse.Namespace
        Namespace with ``lang``, ``log_level``, ``base_dir`` and ``no_launch``.

    Examples
    --------
    >>> ns = parse_cli_args(['--lang', 'sv', '--no-launch'])
    >>> ns.lang, ns.no_launch
    ('sv', True)
    """
    parser = argparse.ArgumentParser(
        description="Bootstrap a Dockerized Django project in the base directory."
    )
    parser.add_argument("--lang", type=str, choices=["en", "sv"], default="en")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console and file logging level.",
    )
    parser.add_argument(
        "--base-dir",
        type=Path,
        default=None,
        help="Directory to bootstrap into (default: current directory).",
    )
    parser.add_argument(
        "--no-launch",
        action="store_true",
        help="Generate and patch files only; do not start containers.",
    )
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> int:
    r"""Run the bootstrap pipeline for parsed CLI arguments.

    Parameters
    ----------
    args : argparse.Namespace
        Result of :func:`parse_cli_args`.

    Returns
    -------
    int
        Process exit status.
    """
    i18n.LANG = args.lang if args.lang in i18n.TEXTS else "en"
    base = args.base_dir if args.base_dir is not None else Path.cwd()
    configure_logging(args.log_level, base=base)
    ui_header(i18n.translate("welcome"))
    try:
        cfg = load_config()
    except AppError as error:
        logger.error("Invalid configuration: %s", error)
        ui_error(error.message)
        return error.exit_code

    result = orchestrator.run_pipeline(base, cfg, launch=not args.no_launch)
    return result.exit_code


def entry_point(argv: list[str] | None = None) -> None:
    """Run the bootstrap application from the command line and exit."""
    sys.exit(run(parse_cli_args(argv)))


__all__ = ["configure_logging", "entry_point", "parse_cli_args", "run"]
