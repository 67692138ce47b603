"""Environment file model (``KEY=value`` lines).

Secrets and connection parameters consumed by both the generated settings
and the orchestration file. Reading an existing file goes through
``python-dotenv`` so quoting and comments follow the same rules the
container tooling uses.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values

from djdock.exceptions import DataValidationError

_KEY_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class EnvFile:
    """Ordered key/value pairs of a ``.env`` file."""

    entries: tuple[tuple[str, str], ...]

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for key, value in self.entries:
            if not _KEY_PATTERN.match(key):
                raise DataValidationError(
                    f"Invalid environment variable name: {key!r}", context={"key": key}
                )
            if key in seen:
                raise DataValidationError(
                    f"Duplicate environment variable: {key}", context={"key": key}
                )
            if "\n" in value or "\r" in value:
                raise DataValidationError(
                    f"Value of {key} spans multiple lines.", context={"key": key}
                )
            seen.add(key)

    @classmethod
    def load(cls, path: Path) -> EnvFile:
        """Read an existing env file; missing files yield an empty record."""
        if not path.exists():
            return cls(())
        values = dotenv_values(path)
        return cls(tuple((key, value or "") for key, value in values.items()))

    def keys(self) -> tuple[str, ...]:
        return tuple(key for key, _ in self.entries)

    def missing(self, required: Iterable[str]) -> list[str]:
        """Return the ``required`` keys this file does not define."""
        keys = set(self.keys())
        return [key for key in required if key not in keys]

    def require(self, required: Iterable[str]) -> None:
        missing = self.missing(required)
        if missing:
            raise DataValidationError(
                "Env file is missing required keys: " + ", ".join(missing),
                context={"missing": missing},
            )

    def render(self) -> str:
        return "".join(f"{key}={value}\n" for key, value in self.entries)


__all__ = ["EnvFile"]
