"""Dependency manifest model.

A manifest is the ordered list of requirement lines captured by
``pip freeze`` in the project environment. The captured list is the single
source of truth: denylisted lines are stripped from it and, when the
freeze omitted it, the framework requirement is appended. No hand-written
pin list ever replaces it.

Examples
--------
>>> m = DependencyManifest.parse("asgiref==3.8.1\\nbcc==0.29.1\\n")
>>> m, removed = m.without(["bcc==0.29.1"])
>>> m.render()
'asgiref==3.8.1\\n'
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from djdock.exceptions import DataValidationError

_NAME_PATTERN = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


def normalize_name(name: str) -> str:
    """Return the PEP 503 normalized form of a distribution name.

    Examples
    --------
    >>> normalize_name("Django_Rest.Framework")
    'django-rest-framework'
    """
    return re.sub(r"[-_.]+", "-", name).lower()


@dataclass(frozen=True)
class Requirement:
    """One line of the manifest (``name==version``, ``name>=version``, ...)."""

    line: str

    @property
    def name(self) -> str | None:
        """Normalized distribution name, or None for URL/editable lines."""
        if self.line.startswith(("-", "#")):
            return None
        match = _NAME_PATTERN.match(self.line)
        return normalize_name(match.group(1)) if match else None

    def canonical(self) -> str:
        """Comparable form: normalized name plus the specifier without spaces."""
        name = self.name
        compact = re.sub(r"\s+", "", self.line)
        if name is None:
            return compact
        match = _NAME_PATTERN.match(compact)
        return name + compact[match.end():] if match else compact


@dataclass(frozen=True)
class DependencyManifest:
    """Ordered, immutable collection of requirement lines."""

    requirements: tuple[Requirement, ...] = ()

    @classmethod
    def parse(cls, text: str) -> DependencyManifest:
        """Parse freeze output, dropping blank and comment lines."""
        lines = (line.strip() for line in text.splitlines())
        return cls(
            tuple(Requirement(line) for line in lines if line and not line.startswith("#"))
        )

    def lines(self) -> list[str]:
        return [req.line for req in self.requirements]

    def count(self, name: str) -> int:
        """Return how many lines declare distribution ``name``."""
        wanted = normalize_name(name)
        return sum(1 for req in self.requirements if req.name == wanted)

    def without(
        self, denylist: Iterable[str]
    ) -> tuple[DependencyManifest, list[Requirement]]:
        r"""Return a copy with every denylisted line removed.

        Parameters
        ----------
        denylist : Iterable[str]
            Requirement lines (``name==version``) to strip.

        Returns
        -------
        tuple[DependencyManifest, list[Requirement]]
            The filtered manifest and the removed requirements.
        """
        banned = {Requirement(entry).canonical() for entry in denylist}
        kept = tuple(r for r in self.requirements if r.canonical() not in banned)
        removed = [r for r in self.requirements if r.canonical() in banned]
        return DependencyManifest(kept), removed

    def ensure(self, name: str, line: str) -> tuple[DependencyManifest, bool]:
        """Append ``line`` when no line declares ``name``; report whether it did."""
        if self.count(name):
            return self, False
        return DependencyManifest(self.requirements + (Requirement(line),)), True

    def validate(self, denylist: Iterable[str], framework: str) -> None:
        r"""Check the manifest invariants before it is written.

        Raises
        ------
        DataValidationError
            If a denylisted line survived or the framework is not declared
            exactly once.
        """
        _, removed = self.without(denylist)
        if removed:
            raise DataValidationError(
                "Manifest contains denylisted entries.",
                context={"entries": [r.line for r in removed]},
            )
        if self.count(framework) != 1:
            raise DataValidationError(
                f"Manifest must declare {framework} exactly once.",
                context={"count": self.count(framework)},
            )

    def render(self) -> str:
        lines = self.lines()
        return "\n".join(lines) + "\n" if lines else ""


def build_manifest(
    freeze_output: str,
    denylist: Iterable[str],
    framework: str,
    framework_version: Callable[[], str],
) -> tuple[DependencyManifest, list[Requirement], Requirement | None]:
    r"""Turn captured freeze output into the manifest that gets written.

    Parameters
    ----------
    freeze_output : str
        Raw stdout of ``pip freeze``.
    denylist : Iterable[str]
        Lines known to break portability.
    framework : str
        Distribution that must be present (``Django``).
    framework_version : Callable[[], str]
        Called only when the framework line is missing, to pin it.

    Returns
    -------
    tuple
        ``(manifest, removed, added)`` where ``added`` is the appended
        framework requirement or None.
    """
    denylist = list(denylist)
    manifest, removed = DependencyManifest.parse(freeze_output).without(denylist)
    added: Requirement | None = None
    if not manifest.count(framework):
        line = f"{framework}=={framework_version()}"
        manifest, _ = manifest.ensure(framework, line)
        added = Requirement(line)
    manifest.validate(denylist, framework)
    return manifest, removed, added


__all__ = ["DependencyManifest", "Requirement", "build_manifest", "normalize_name"]
