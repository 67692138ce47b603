"""Filesystem utilities to validate and safely remove whitelisted paths.

The provisioner removes a half-created virtual environment before failing.
These helpers make sure that removal can only ever hit the environment
directory under the bootstrapped base path.

Functions
---------
- ``create_safe_path``: Validate and stamp a path as safe for removal.
- ``safe_rmtree``: Remove a validated directory tree.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Iterable, NewType

logger = logging.getLogger(__name__)

# NewType used as a static "seal" to indicate the path is validated for removal.
_ValidatedPath = NewType("_ValidatedPath", Path)


def create_safe_path(
    path_to_validate: Path, base: Path, allowed: Iterable[Path]
) -> _ValidatedPath:
    r"""Validate and stamp a Path as safe for destructive operations.

    Multiple safety checks:
    - Never allows deletion of ``base`` itself.
    - Requires the path to be inside ``base``.
    - Permits only the explicitly ``allowed`` directories (and their
      contents).

    Parameters
    ----------
    path_to_validate : Path
        The directory path to be validated for safe removal.
    base : Path
        Root the pipeline operates under.
    allowed : Iterable[Path]
        Whitelisted directories.

    Returns
    -------
    _ValidatedPath
        The resolved path, stamped for safe usage by removal helpers.

    Raises
    ------
    PermissionError
        If the path is the base, outside the base, or not whitelisted.

    Examples
    --------
    >>> from pathlib import Path
    >>> create_safe_path(Path("/"), Path("/tmp/b"), [])  # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
      ...
    PermissionError: SECURITY STOP: Attempt to delete a path outside the base was blocked.
    """
    base_resolved = Path(base).resolve()
    target_path = Path(path_to_validate).resolve()

    if target_path == base_resolved:
        raise PermissionError(
            "SECURITY STOP: Attempt to delete the base directory was blocked."
        )
    if not target_path.is_relative_to(base_resolved):
        raise PermissionError(
            "SECURITY STOP: Attempt to delete a path outside the base was blocked."
        )

    allowed_resolved = [Path(p).resolve() for p in allowed]
    is_safe_path = any(
        target_path == root or target_path.is_relative_to(root)
        for root in allowed_resolved
    )
    if not is_safe_path:
        raise PermissionError(
            f"SECURITY STOP: Path '{target_path}' is not in the whitelist."
        )
    return _ValidatedPath(target_path)


def safe_rmtree(safe_path: _ValidatedPath) -> None:
    r"""Remove a directory tree for a validated path.

    Parameters
    ----------
    safe_path : _ValidatedPath
        A path returned by ``create_safe_path``.

    Notes
    -----
    - Logs actions at WARNING and INFO levels before and after removal.
    - If the path does not exist, the function is a no-op.
    """
    if safe_path.exists():
        logger.warning(f"Performing safe rmtree on: {safe_path}")
        shutil.rmtree(safe_path)
        logger.info(f"Removed directory: {safe_path}")
    else:
        logger.info(f"Path '{safe_path}' does not exist; nothing to remove.")


def describe_tree(root: Path, limit: int = 200) -> list[str]:
    """Return a sorted, relative listing of ``root`` for diagnostics."""
    if not root.exists():
        return []
    entries = sorted(p.relative_to(root).as_posix() for p in root.rglob("*"))
    return entries[:limit]


__all__ = ["create_safe_path", "describe_tree", "safe_rmtree"]
