"""Settings Patcher: externalize the generated settings to the environment.

Rewrites the ``SECRET_KEY`` and ``DEBUG`` assignments to read from
environment variables with literal fallbacks, makes sure ``os`` is
imported, and replaces the generator's ``DATABASES`` with a marked block
whose values come from the ``DATABASE_*`` variables. A second run finds
the marker and the rewritten lines in place and leaves the file alone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from djdock.config import (
    DATABASE_DEFAULTS,
    DATABASES_MARKER,
    DEBUG_FALLBACK,
    SECRET_KEY_FALLBACK,
)
from djdock.exceptions import SettingsPatchError
from djdock.setup.i18n import _
from djdock.setup.ui.basic import ui_info, ui_success

from .document import SettingsDocument

logger = logging.getLogger(__name__)

SECRET_KEY_LINE = (
    f'SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "{SECRET_KEY_FALLBACK}")'
)
DEBUG_LINE = (
    f'DEBUG = os.environ.get("DEBUG", "{DEBUG_FALLBACK}").lower() in ("true", "1")'
)


def database_block() -> list[str]:
    """Return the marked ``DATABASES`` block, one list item per line."""
    lines = [DATABASES_MARKER, "DATABASES = {", "    'default': {"]
    for key, variable, default in DATABASE_DEFAULTS:
        lines.append(f"        '{key}': os.getenv('{variable}', '{default}'),")
    lines += ["    }", "}"]
    return lines


@dataclass(frozen=True)
class PatchReport:
    """Outcome of ``patch_settings``: the file and the edits applied to it."""

    path: Path
    changes: tuple[str, ...]

    @property
    def changed(self) -> bool:
        return bool(self.changes)


def _rewrite_first(
    doc: SettingsDocument, name: str, line: str
) -> tuple[SettingsDocument, bool]:
    spans = doc.assignments(name)
    if not spans:
        raise SettingsPatchError(
            f"No top-level {name} assignment found in settings.", context={"name": name}
        )
    first = spans[0]
    if doc.lines[first.start : first.end] == [line]:
        return doc, False
    return doc.replace(first, [line]), True


def patch_document(doc: SettingsDocument) -> tuple[SettingsDocument, list[str]]:
    r"""Apply every settings edit to ``doc``.

    Returns
    -------
    tuple[SettingsDocument, list[str]]
        The patched document and the names of the edits that changed it.

    Raises
    ------
    SettingsPatchError
        If ``SECRET_KEY`` or ``DEBUG`` is not assigned at top level.
    """
    changes: list[str] = []
    if not doc.imports_module("os"):
        doc = doc.insert(doc.import_insertion_line(), ["import os"])
        changes.append("import os")

    for name, line in (("SECRET_KEY", SECRET_KEY_LINE), ("DEBUG", DEBUG_LINE)):
        doc, rewritten = _rewrite_first(doc, name, line)
        if rewritten:
            changes.append(name)

    if not doc.contains_line(DATABASES_MARKER):
        # Bottom-up so earlier spans stay valid.
        for span in reversed(doc.assignments("DATABASES")):
            doc = doc.remove(span)
        doc = doc.append_block(database_block())
        changes.append("DATABASES")
    return doc, changes


def patch_settings(settings_file: Path) -> PatchReport:
    r"""Patch the generated settings module in place.

    Parameters
    ----------
    settings_file : Path
        ``<project>/<project>/settings.py``.

    Returns
    -------
    PatchReport
        What changed; empty when the file was already patched, in which
        case it is not rewritten.

    Raises
    ------
    SettingsPatchError
        If the file is missing, is not valid Python, or lacks one of the
        externalized assignments.
    """
    if not settings_file.is_file():
        raise SettingsPatchError(
            f"Settings file not found: {settings_file}",
            context={"path": str(settings_file)},
        )
    original = settings_file.read_text(encoding="utf-8")
    doc, changes = patch_document(SettingsDocument.parse(original))
    rendered = doc.render()
    if rendered != original:
        with settings_file.open("w", encoding="utf-8", newline="\n") as handle:
            handle.write(rendered)
    if changes:
        logger.info("Patched %s: %s", settings_file, ", ".join(changes))
        ui_success(_("settings_updated"))
    else:
        ui_info(_("settings_unchanged"))
    return PatchReport(settings_file, tuple(changes))


__all__ = [
    "DEBUG_LINE",
    "PatchReport",
    "SECRET_KEY_LINE",
    "database_block",
    "patch_document",
    "patch_settings",
]
