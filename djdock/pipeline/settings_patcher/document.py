"""Minimal structured view of a generated settings module.

``SettingsDocument`` keeps the source as a list of lines and indexes the
top-level statements with ``ast`` so edits can target whole assignment
spans instead of matching text. Every edit returns a new document; the
original is never mutated.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass

from djdock.exceptions import SettingsPatchError


@dataclass(frozen=True)
class Span:
    """Zero-based, end-exclusive line range of one top-level statement."""

    start: int
    end: int


def _assigned_names(node: ast.stmt) -> list[str]:
    if isinstance(node, ast.Assign):
        targets = node.targets
    elif isinstance(node, ast.AnnAssign):
        targets = [node.target]
    else:
        return []
    return [t.id for t in targets if isinstance(t, ast.Name)]


def _is_docstring(node: ast.stmt) -> bool:
    return (
        isinstance(node, ast.Expr)
        and isinstance(node.value, ast.Constant)
        and isinstance(node.value.value, str)
    )


class SettingsDocument:
    r"""Lines of a settings module plus its top-level statement index.

    Parameters
    ----------
    lines : list[str]
        Source lines without line terminators.

    Raises
    ------
    SettingsPatchError
        If the lines do not form valid Python.

    Examples
    --------
    >>> doc = SettingsDocument.parse("DEBUG = True\n")
    >>> doc.assignments("DEBUG")
    [Span(start=0, end=1)]
    """

    def __init__(self, lines: list[str]) -> None:
        self.lines = list(lines)
        try:
            tree = ast.parse("\n".join(self.lines))
        except SyntaxError as error:
            raise SettingsPatchError(
                f"Settings file is not valid Python: {error.msg} (line {error.lineno}).",
                context={"line": error.lineno},
            ) from error
        self._body = tree.body

    @classmethod
    def parse(cls, text: str) -> SettingsDocument:
        return cls(text.splitlines())

    def render(self) -> str:
        return "\n".join(self.lines) + "\n"

    @staticmethod
    def _span(node: ast.stmt) -> Span:
        return Span(node.lineno - 1, node.end_lineno or node.lineno)

    def assignments(self, name: str) -> list[Span]:
        """Return the spans of every top-level assignment to ``name``."""
        return [self._span(n) for n in self._body if name in _assigned_names(n)]

    def imports_module(self, module: str) -> bool:
        """Return whether ``import <module>`` appears at top level."""
        return any(
            isinstance(node, ast.Import)
            and any(alias.name == module and alias.asname is None for alias in node.names)
            for node in self._body
        )

    def import_insertion_line(self) -> int:
        """Line before which a new top-level import belongs.

        That is the first import after any ``__future__`` imports, else
        the line after the module docstring, else the top of the file.
        """
        after = 0
        for index, node in enumerate(self._body):
            if index == 0 and _is_docstring(node):
                after = self._span(node).end
                continue
            if isinstance(node, ast.ImportFrom) and node.module == "__future__":
                after = self._span(node).end
                continue
            if isinstance(node, (ast.Import, ast.ImportFrom)):
                return self._span(node).start
            break
        return after

    def contains_line(self, text: str) -> bool:
        """Return whether any line, stripped, equals ``text``."""
        return any(line.strip() == text for line in self.lines)

    def replace(self, span: Span, new_lines: list[str]) -> SettingsDocument:
        return SettingsDocument(self.lines[: span.start] + new_lines + self.lines[span.end :])

    def insert(self, index: int, new_lines: list[str]) -> SettingsDocument:
        return self.replace(Span(index, index), new_lines)

    def remove(self, span: Span) -> SettingsDocument:
        return self.replace(span, [])

    def append_block(self, block: list[str]) -> SettingsDocument:
        """Append ``block`` separated from the existing content by one blank line."""
        lines = list(self.lines)
        while lines and not lines[-1].strip():
            lines.pop()
        return SettingsDocument(lines + [""] + block)


__all__ = ["SettingsDocument", "Span"]
