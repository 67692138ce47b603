"""Minimal UI output primitives for the bootstrap terminal output.

Rendering only: rules announcing each stage, headers, and informational,
success, warning and error lines. No configuration or process state is
read here, and none of these functions raise.

Stage announcements and failures are the user-visible protocol of the
pipeline: one rule line per stage, then a labeled error line immediately
before termination when a stage fails.
"""

from __future__ import annotations

from djdock.setup.console_helpers import (
    _RICH_CONSOLE,
    Panel,
    Rule,
    rprint,
    ui_has_rich,
)


def ui_rule(title: str) -> None:
    r"""Render a horizontal rule announcing a section.

    Parameters
    ----------
    title : str
        Title text to display as the rule caption.

    Examples
    --------
    >>> ui_rule("Step 1: Initializing Django Project")
    """
    if ui_has_rich():
        _RICH_CONSOLE.print(Rule(title, style="bold blue"))
    else:
        rprint(f"==> {title}")


def ui_header(title: str) -> None:
    r"""Render a prominent banner.

    Parameters
    ----------
    title : str
        Banner text to display.
    """
    if ui_has_rich():
        _RICH_CONSOLE.print(
            Panel.fit(title, style="bold white on blue", border_style="blue")
        )
    else:
        rprint(title)


def ui_info(message: str) -> None:
    """Display an informational message."""
    if ui_has_rich():
        rprint(f"[cyan]{message}[/cyan]")
    else:
        rprint(message)


def ui_success(message: str) -> None:
    """Display a success message with a check mark."""
    if ui_has_rich():
        rprint(f"[green]✓ {message}[/green]")
    else:
        rprint(message)


def ui_warning(message: str) -> None:
    """Display a warning message."""
    if ui_has_rich():
        rprint(f"[yellow]⚠ {message}[/yellow]")
    else:
        rprint(message)


def ui_error(message: str) -> None:
    r"""Display a labeled error line.

    Parameters
    ----------
    message : str
        Error text. Plain output prefixes ``Error:`` unless already present.
    """
    if ui_has_rich():
        rprint(f"[bold red]✗ {message}[/bold red]")
    elif message.startswith("Error"):
        rprint(message)
    else:
        rprint(f"Error: {message}")


__all__ = [
    "ui_error",
    "ui_header",
    "ui_info",
    "ui_rule",
    "ui_success",
    "ui_warning",
]
