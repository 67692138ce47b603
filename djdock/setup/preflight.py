"""Preflight check for the external tools the pipeline delegates to.

Runs before anything touches the filesystem. Every missing tool is
reported on its own line, then a single ``PreflightMissingToolError``
aborts the run.
"""

from __future__ import annotations

import logging
import shutil
from typing import Iterable

from djdock.exceptions import PreflightMissingToolError
from djdock.setup.i18n import translate
from djdock.setup.ui.basic import ui_error, ui_success

logger = logging.getLogger(__name__)


def find_missing_tools(required: Iterable[str]) -> list[str]:
    """Return the names in ``required`` that are not found on ``PATH``.

    Examples
    --------
    >>> find_missing_tools(["definitely-not-a-real-tool-xyz"])
    ['definitely-not-a-real-tool-xyz']
    """
    return [name for name in required if shutil.which(name) is None]


def check_required_tools(required: Iterable[str]) -> None:
    r"""Verify every required external command is installed.

    Parameters
    ----------
    required : Iterable[str]
        Command names such as ``python3`` or ``docker-compose``.

    Raises
    ------
    PreflightMissingToolError
        Listing all missing commands, after each has been reported.
    """
    names = list(required)
    missing = find_missing_tools(names)
    for tool in missing:
        ui_error(translate("tool_missing", tool=tool))
    if missing:
        logger.error("Missing required tools: %s", ", ".join(missing))
        raise PreflightMissingToolError(missing)
    logger.info("All required tools present: %s", ", ".join(names))
    ui_success(translate("tools_ok", tools=", ".join(names)))


__all__ = ["check_required_tools", "find_missing_tools"]
