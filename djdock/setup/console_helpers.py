"""Rich integration for the bootstrap terminal output.

This module is the only place that imports Rich. Everything else prints
through ``rprint`` or the ``ui_*`` primitives in :mod:`djdock.setup.ui.basic`,
so tests can redirect output by patching a single console object.

Canonical Usage
---------------
>>> from djdock.setup.console_helpers import rprint
>>> rprint("[green]ready[/green]")
ready
"""

from __future__ import annotations

import os
from typing import IO, Any

from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

_RICH_CONSOLE: Console = Console()


def ui_has_rich() -> bool:
    r"""Return whether styled output should be used.

    Styling is disabled when ``NO_COLOR`` is set or the console is not a
    terminal; markup is still stripped in that case.

    Returns
    -------
    bool
        True when the console renders colour.

    Examples
    --------
    >>> ui_has_rich() in (True, False)
    True
    """
    if os.environ.get("NO_COLOR"):
        return False
    return bool(_RICH_CONSOLE.is_terminal)


def rprint(
    *objects: Any,
    sep: str = " ",
    end: str = "\n",
    file: IO[str] | None = None,
    flush: bool = False,
) -> None:
    r"""Print objects through Rich, mirroring the builtin ``print`` signature.

    Parameters
    ----------
    *objects : Any
        Objects to be printed, separated by ``sep``.
    sep : str, optional
        Separator between objects, default ``' '``.
    end : str, optional
        Line ending, default newline.
    file : IO[str], optional
        File-like object to print to; defaults to the shared console.
    flush : bool, optional
        Forcibly flush output.

    Examples
    --------
    >>> import io
    >>> buf = io.StringIO()
    >>> rprint("FileOut", file=buf)
    >>> "FileOut" in buf.getvalue()
    True
    """
    from rich import print as rich_print

    if file is None:
        _RICH_CONSOLE.print(*objects, sep=sep, end=end)
        if flush:
            _RICH_CONSOLE.file.flush()
        return
    rich_print(*objects, sep=sep, end=end, file=file, flush=flush)


__all__ = [
    "_RICH_CONSOLE",
    "Console",
    "Panel",
    "Rule",
    "Table",
    "rprint",
    "ui_has_rich",
]
