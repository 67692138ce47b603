"""Rendering helpers for the pipeline status table.

Provides localized status labels and the Rich table summarising every
stage of a bootstrap run.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from djdock.setup.console_helpers import Table


def _status_label(lang: str, base: str) -> str:
    """Return a localized status label for a given pipeline status key.

    Parameters
    ----------
    lang : str
        Language code (e.g., ``'en'`` or ``'sv'``).
    base : str
        Status key: ``'waiting'``, ``'running'``, ``'ok'``, ``'fail'`` or
        ``'skipped'``.

    Returns
    -------
    str
        Localized status label.

    Examples
    --------
    >>> _status_label("sv", "ok")
    '✅ Klart'
    """
    if lang == "sv":
        labels = {
            "waiting": "⏳ Väntar",
            "running": "▶️  Körs",
            "ok": "✅ Klart",
            "fail": "❌ Misslyckades",
            "skipped": "⏭️  Hoppades över",
        }
    else:
        labels = {
            "waiting": "⏳ Waiting",
            "running": "▶️  Running",
            "ok": "✅ Done",
            "fail": "❌ Failed",
            "skipped": "⏭️  Skipped",
        }
    return labels.get(base, base)


def _render_pipeline_table(
    translate: Callable[[str], str], rows: Iterable[tuple[str, str]]
) -> Table:
    """Construct the table summarising pipeline status.

    Parameters
    ----------
    translate : Callable[[str], str]
        Translation function for i18n keys.
    rows : Iterable[tuple[str, str]]
        ``(stage title, status label)`` pairs in pipeline order.

    Returns
    -------
    Table
        A Rich table with one row per stage.
    """
    table = Table(
        title=translate("pipeline_title"),
        show_header=True,
        header_style="bold blue",
    )
    table.add_column("Step", style="bold")
    table.add_column("Status")
    for title, status in rows:
        table.add_row(title, status)
    return table


__all__ = ["_render_pipeline_table", "_status_label"]
